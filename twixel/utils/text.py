"""
Text Processing Utilities

Helpers for the RSS feed:
1. escape_cdata / escape_html: make user text safe inside the XML document
2. format_rss_date: RFC 1123 dates for <pubDate>
3. get_domain_url: absolute site URL from the request headers
"""

from datetime import datetime, timezone
from email.utils import format_datetime


def escape_cdata(text: str) -> str:
    """
    Escape text for a <![CDATA[ ... ]]> section.

    CDATA cannot contain "]]>", so each occurrence is split across two
    sections: the "]]" closes the first one and ">" opens the next.

    Example:
        >>> escape_cdata("a]]>b")
        'a]]]]><![CDATA[>b'
    """
    return text.replace("]]>", "]]]]><![CDATA[>")


def escape_html(text: str) -> str:
    """
    Escape the five HTML special characters.

    Example:
        >>> escape_html('<b>"Tom" & \\'Jerry\\'</b>')
        '&lt;b&gt;&quot;Tom&quot; &amp; &#039;Jerry&#039;&lt;/b&gt;'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def format_rss_date(value: datetime) -> str:
    """
    Format a timestamp the way RSS readers expect.

    Stored timestamps are naive UTC, so they are tagged as UTC first.

    Example:
        >>> format_rss_date(datetime(2024, 1, 2, 3, 4, 5))
        'Tue, 02 Jan 2024 03:04:05 GMT'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def get_domain_url(headers) -> str:
    """
    Build the absolute base URL of the site.

    X-Forwarded-Host wins over Host so the feed links point at the public
    address when the app runs behind a proxy. Local hosts are served over
    plain http.

    Raises:
        ValueError: if neither header is present
    """
    host = headers.get("x-forwarded-host") or headers.get("host")
    if not host:
        raise ValueError("Could not determine domain URL.")
    protocol = "http" if "localhost" in host else "https"
    return f"{protocol}://{host}"
