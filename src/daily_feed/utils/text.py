"""Text and URL helpers."""

from urllib.parse import urlparse


TRUNCATION_MARKER = "..."


def truncate_text(text: str, max_chars: int) -> str:
    """Truncate text to max_chars, appending a marker when cut.

    Args:
        text: Text to truncate.
        max_chars: Maximum number of characters kept from the text.

    Returns:
        The original text, or its first max_chars characters plus "...".
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def extract_domain(url: str | None) -> str | None:
    """Extract the host name of a URL without a leading "www.".

    Args:
        url: URL to parse.

    Returns:
        Host name, or None if the URL has no parsable host.
    """
    if not url:
        return None
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    return hostname.removeprefix("www.")
