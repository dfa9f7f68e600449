"""URL slug generation for posts and categories."""
from __future__ import annotations

import re
import unicodedata

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str | None) -> str:
    """Turn a title or name into a lowercase, hyphen-separated slug.

    Accented characters are folded to their ASCII base letter; anything else
    outside ``[a-z0-9]`` collapses into single hyphens. Applying the function
    to its own output returns the same string.
    """

    if not value:
        return ""

    normalised = unicodedata.normalize("NFKD", str(value))
    ascii_text = normalised.encode("ascii", "ignore").decode("ascii")
    return _NON_SLUG_RE.sub("-", ascii_text.lower()).strip("-")


__all__ = ["slugify"]
