# Pure domain services: condense a document group and wrap it for citation.
from __future__ import annotations

import re
from collections.abc import Sequence

from context_fusion.domain.models import ContextBlock, DocumentGroup
from context_fusion.domain.services.normalization import (
    compact_whitespace,
    dedupe_by_fingerprint,
)

# Abbreviations and decimals ("e.g. ", "3. ") over-split; accepted imprecision.
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")

_ATTR_ESCAPES = {"&": "&amp;", '"': "&quot;", "<": "&lt;", ">": "&gt;"}

CONTEXT_OPEN = "<context"
CONTEXT_CLOSE = "</context>"


def first_n_sentences(text: str, n: int = 4) -> str:
    """Keep the first ``n`` sentences, joined by single spaces."""
    if n <= 0:
        return ""
    parts = [p for p in _SENTENCE_BOUNDARY_RE.split(text or "") if p]
    return " ".join(parts[:n])


def escape_attr(value: str) -> str:
    return "".join(_ATTR_ESCAPES.get(ch, ch) for ch in str(value))


def format_block(content: str, citation: str) -> str:
    """Wrap content as ``<context source="...">`` block; "" if nothing is left."""
    clean = compact_whitespace(content)
    if not clean:
        return ""
    return f'{CONTEXT_OPEN} source="{escape_attr(citation)}">\n{clean}\n{CONTEXT_CLOSE}'


def condense_group(group: DocumentGroup, max_sentences: int) -> str:
    """Normalize, dedupe within the group, then keep the densest prefix."""
    normalized = [c for c in (compact_whitespace(t) for t in group.chunks) if c]
    return first_n_sentences(" ".join(dedupe_by_fingerprint(normalized)), max_sentences)


def build_blocks(
    groups: Sequence[DocumentGroup],
    max_sentences: int,
    untitled_placeholder: str = "(untitled)",
) -> list[ContextBlock]:
    """One block per group with non-empty condensed text, in group order."""
    blocks: list[ContextBlock] = []
    for g in groups:
        citation = g.title or untitled_placeholder
        piece = format_block(condense_group(g, max_sentences), citation)
        if piece.strip():
            blocks.append(ContextBlock(parent_id=g.parent_id, citation=citation, text=piece))
    return blocks
