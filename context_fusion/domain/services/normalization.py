"""Whitespace normalization and per-group deduplication of fragments.

Why: Raw index chunks carry structural noise (zero-width characters, CRLF,
padded lines, runs of blank lines). Normalizing first keeps whitespace-only
variants from counting as distinct fragments or inflating sentence counts.

Functions:
- compact_whitespace: idempotent text normalizer
- content_fingerprint: stable content key for exact-duplicate detection
- dedupe_by_fingerprint: keep the first occurrence of each fingerprint
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable

# Zero-width and invisible separators, plus C0 and C1 controls other than \t \n \r
# and NEL (\x85), which the space collapse below turns into a space.
_INVISIBLE_RE = re.compile(
    "[\u200b-\u200d\u2060\ufeff\u2028\u2029"
    "\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x84\x86-\x9f]"
)
_LINE_ENDING_RE = re.compile(r"\r\n?")
_INLINE_SPACE_RE = re.compile(r"[^\S\n]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")

FINGERPRINT_BYTES = 8


def compact_whitespace(text: str | None) -> str:
    """Remove invisible chars, normalize line endings, collapse spaces and blank lines.

    Examples:
        >>> compact_whitespace("  a \\t b \\r\\n\\r\\n\\r\\n\\r\\nc\\u200b ")
        'a b\\n\\nc'

    Note:
        Idempotent: compact_whitespace(compact_whitespace(s)) == compact_whitespace(s).
    """
    if not text:
        return ""
    out = _INVISIBLE_RE.sub("", text)
    out = _LINE_ENDING_RE.sub("\n", out)
    out = "\n".join(_INLINE_SPACE_RE.sub(" ", line).strip() for line in out.split("\n"))
    out = _BLANK_RUN_RE.sub("\n\n", out)
    return out.strip()


def content_fingerprint(text: str) -> str:
    """Deterministic 64-bit BLAKE2b hex digest of the UTF-8 text.

    Collision policy: two different fragments sharing a fingerprint are
    treated as duplicates. At 64 bits and a handful of fragments per group
    the odds are negligible, so no secondary equality check is made.
    """
    return hashlib.blake2b(text.encode("utf-8"), digest_size=FINGERPRINT_BYTES).hexdigest()


def dedupe_by_fingerprint(chunks: Iterable[str]) -> list[str]:
    """Stable dedup of already-normalized chunks; first occurrence wins."""
    seen: set[str] = set()
    out: list[str] = []
    for c in chunks:
        key = content_fingerprint(c)
        if key in seen:
            continue
        seen.add(key)
        out.append(c)
    return out
