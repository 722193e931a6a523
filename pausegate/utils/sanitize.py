"""Input canonicalization and output-safety helpers.

Values are cleaned twice: once when they are stored (the settings API) and
again when they are rendered (the maintenance page).
"""

import ipaddress
from urllib.parse import urlsplit

import nh3
from markupsafe import Markup

# Tags and attributes permitted in the subheading
ALLOWED_TAGS = {"a", "br", "strong", "b", "em", "i"}
ALLOWED_ATTRIBUTES = {"a": {"href", "target", "rel"}}

ALLOWED_URL_SCHEMES = {"http", "https", "mailto", "tel"}


def sanitize_text(value: object) -> str:
    """Reduce a value to a single line of plain text.

    Tags are removed, entities decoded and runs of whitespace (including
    newlines and tabs) collapsed to a single space.
    """
    if value is None:
        return ""
    return Markup(str(value)).striptags()


def sanitize_html(value: object) -> str:
    """Clean a value down to the small HTML subset allowed in the subheading."""
    if value is None:
        return ""
    return nh3.clean(
        str(value),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
        link_rel=None,
    )


def sanitize_url(value: object) -> str:
    """Return the URL if it is absolute with a safe scheme or site-relative, else ''."""
    if value is None:
        return ""
    url = "".join(str(value).split())
    if not url:
        return ""

    if url.startswith("/") and not url.startswith("//"):
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        return ""

    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES:
        return ""
    if parts.scheme.lower() in ("http", "https") and not parts.netloc:
        return ""
    return url


def is_valid_ip(value: str) -> bool:
    """Check that a string is a literal IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True
