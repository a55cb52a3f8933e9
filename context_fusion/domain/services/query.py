# Pure domain service: query augmentation with router focus terms.
from __future__ import annotations

from collections.abc import Iterable


def augment_query(text: str, keywords: Iterable[str] = ()) -> str:
    """Append focus terms as a bracketed hint; returns ``text`` unchanged without terms.

    Examples:
        >>> augment_query("vacation policy", ["pto", "carry-over"])
        'vacation policy\\n\\n[focus terms: pto, carry-over]'
    """
    terms = [k.strip() for k in keywords if k and k.strip()]
    if not terms:
        return text
    return f"{text}\n\n[focus terms: {', '.join(terms)}]"
