"""XML fragment builders for sitemaps and sitemap indexes.

Everything here is a pure string transformation: no ORM access and no clock
reads. Callers supply timestamps explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone as dt_timezone
from enum import StrEnum
from urllib.parse import quote
from xml.sax.saxutils import escape

from django.utils import timezone

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Characters JavaScript's encodeURI leaves untouched (besides alphanumerics).
_URI_SAFE_CHARACTERS = ";,/?:@&=+$-_.!~*'()#"


class ChangeFrequency(StrEnum):
    """Allowed `<changefreq>` values."""

    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


def encode_location(path: str) -> str:
    """Percent-encode a path the way `encodeURI` does.

    Spaces, `%` and non-ASCII characters are encoded; URI delimiters such as
    `/`, `?` and `#` are kept.
    """

    return quote(path, safe=_URI_SAFE_CHARACTERS)


def format_lastmod(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision.

    Naive datetimes are assumed to already be UTC.

    Returns:
        A string such as `2017-03-04T05:06:07.000Z`.
    """

    if timezone.is_naive(value):
        value = value.replace(tzinfo=dt_timezone.utc)
    value = value.astimezone(dt_timezone.utc)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def format_priority(value: str | float) -> str:
    """Validate a priority and return its textual form.

    Raises:
        ValueError: When the value is not a number within [0.0, 1.0].
    """

    numeric = float(value)
    if not 0.0 <= numeric <= 1.0:
        raise ValueError(f"Sitemap priority must be within 0.0 and 1.0, got {value!r}")
    if isinstance(value, str):
        return value.strip()
    return f"{numeric:.1f}"


def build_url_entry(
    base_url: str,
    loc: str,
    *,
    priority: str | float | None = None,
    lastmod: datetime | None = None,
    changefreq: ChangeFrequency | str | None = None,
) -> str:
    """Render one `<url>` element.

    Args:
        base_url: Public site root; `loc` is appended after a `/`.
        loc: Unencoded path below the site root.
        priority: Optional priority in [0.0, 1.0].
        lastmod: Optional last-modified timestamp.
        changefreq: Optional change frequency.

    Returns:
        The `<url>` element. Only supplied fields produce tags.

    Raises:
        ValueError: For an out-of-range priority or unknown change frequency.
    """

    location = f"{base_url.rstrip('/')}/{encode_location(loc)}"
    tags = [f"<loc>{escape(location)}</loc>"]
    if lastmod is not None:
        tags.append(f"<lastmod>{format_lastmod(lastmod)}</lastmod>")
    if priority is not None:
        tags.append(f"<priority>{format_priority(priority)}</priority>")
    if changefreq is not None:
        tags.append(f"<changefreq>{ChangeFrequency(changefreq).value}</changefreq>")
    body = "\n    ".join(tags)
    return f"  <url>\n    {body}\n  </url>"


def build_sitemap(entries: Iterable[str]) -> str:
    """Wrap `<url>` elements in a `<urlset>` document."""

    return _wrap_document("urlset", entries)


def build_sitemap_refs(
    base_api_url: str, resource: str, page_count: int, *, generated_at: datetime
) -> list[str]:
    """Render one `<sitemap>` reference per page of a resource.

    Args:
        base_api_url: Public API root serving the sitemap documents.
        resource: Resource tag used in the document name.
        page_count: Number of pages to reference (0 renders nothing).
        generated_at: Timestamp stamped as `<lastmod>` on every reference.
    """

    base = base_api_url.rstrip("/")
    lastmod = format_lastmod(generated_at)
    return [
        (
            "  <sitemap>\n"
            f"    <loc>{escape(f'{base}/sitemap-{resource}-{index}.xml')}</loc>\n"
            f"    <lastmod>{lastmod}</lastmod>\n"
            "  </sitemap>"
        )
        for index in range(page_count)
    ]


def build_sitemap_index(refs: Iterable[str]) -> str:
    """Wrap `<sitemap>` references in a `<sitemapindex>` document."""

    return _wrap_document("sitemapindex", refs)


def _wrap_document(root: str, children: Iterable[str]) -> str:
    """Return a standalone XML document with newline-separated children."""

    lines = [XML_DECLARATION, f'<{root} xmlns="{SITEMAP_NAMESPACE}">']
    lines.extend(children)
    lines.append(f"</{root}>")
    return "\n".join(lines)
