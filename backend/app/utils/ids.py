"""Conversion between short article ids and Google Reader item ids.

The short id is what appears in page URLs; the full id is what FreshRSS
expects in ``i=`` parameters. Both directions preserve the case of the id
body so that a round trip reproduces the input exactly.
"""

from app.constants.briefing import ARTICLE_ID_PREFIX

_PREFIX_LOWER = ARTICLE_ID_PREFIX.lower()


def _has_prefix(value: str) -> bool:
    return value[: len(ARTICLE_ID_PREFIX)].lower() == _PREFIX_LOWER


def to_short_id(full_id: str | None) -> str:
    """Strip the item prefix if present.

    >>> to_short_id("tag:google.com,2005:reader/item/000642d52cde0249")
    '000642d52cde0249'
    """
    if not full_id:
        return ""
    if _has_prefix(full_id):
        return full_id[len(ARTICLE_ID_PREFIX):]
    return full_id


def to_full_id(short_id: str | None) -> str:
    """Prepend the item prefix unless the id is already fully qualified.

    Ids containing a colon belong to another scheme (``urn:uuid:...``) and
    are returned unchanged.
    """
    if not short_id:
        return ""
    if _has_prefix(short_id) or ":" in short_id:
        return short_id
    return f"{ARTICLE_ID_PREFIX}{short_id}"
