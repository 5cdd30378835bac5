"""
URL slugs for records.

Every bridgeable record is addressed by a slug in its ``url`` column; slugs
are generated from the record's title when none is supplied.
"""

import re

from unidecode import unidecode

_NON_SLUG = re.compile(r"[^a-z0-9]+")

# Matches the length of the url column index on most backends
MAX_SLUG_LENGTH = 200


def slugify(text, separator: str = "-", max_length: int = MAX_SLUG_LENGTH) -> str:
    """
    Transliterate ``text`` to ASCII and reduce it to a lowercase slug.

    Returns an empty string when nothing sluggable is left; callers pick
    their own fallback.
    """
    if text is None:
        return ""
    slug = _NON_SLUG.sub(separator, unidecode(str(text)).lower()).strip(separator)
    if max_length and len(slug) > max_length:
        slug = slug[:max_length].rstrip(separator)
    return slug
