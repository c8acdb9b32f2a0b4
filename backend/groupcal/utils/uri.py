"""
Slug generation for calendar URIs.
"""
import re
import unicodedata

_NON_SLUG = re.compile(r"[^a-z0-9]+")
_NUMBERED = re.compile(r"^(?P<base>.*)-(?P<number>\d+)$")

# Placeholder for names with nothing URL-safe left in them
EMPTY_SLUG = "n-a"


def slugify(value: str) -> str:
    """Build a URL-safe slug from a display name."""
    ascii_value = (
        unicodedata.normalize("NFKD", value)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    slug = _NON_SLUG.sub("-", ascii_value.lower()).strip("-")
    return slug or EMPTY_SLUG


def suggest_uri(uri: str) -> str:
    """
    Suggest the next candidate for a URI that is already taken.

    ``work`` becomes ``work-1``, ``work-1`` becomes ``work-2`` and so on.
    An empty URI is returned unchanged since there is nothing to number.
    """
    if not uri:
        return uri

    match = _NUMBERED.match(uri)
    if match:
        return f"{match.group('base')}-{int(match.group('number')) + 1}"
    return f"{uri}-1"
