# context_fusion/domain/models.py
# Domain models must be pure (no I/O, no external libs)
from __future__ import annotations

from dataclasses import dataclass, field

from context_fusion.domain.types import Score


@dataclass(frozen=True)
class Candidate:
    """
    Immutable retrieved fragment, in the provider's native rank order.

    - id:         chunk key in the index
    - parent_id:  logical source document; None means "the chunk is its own parent"
    - title:      citation title of the parent document (may be missing)
    - text:       fragment text (may be missing)
    - score:      provider relevance score; the scale is provider specific
    """

    id: str
    parent_id: str | None = None
    title: str | None = None
    text: str | None = None
    score: Score = 0.0

    @property
    def parent_key(self) -> str:
        """Grouping key: parent id, falling back to the chunk id."""
        return self.parent_id or self.id or "_"


@dataclass(frozen=True)
class DocumentGroup:
    """Selected fragments of one parent document, in selection order."""

    parent_id: str
    title: str | None
    chunks: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ContextBlock:
    """One citation-tagged block of condensed text."""

    parent_id: str
    citation: str
    text: str


@dataclass(frozen=True)
class SearchDecision:
    """Upstream router output: whether to search and which focus terms to use."""

    should_search: bool
    keywords: tuple[str, ...] = ()
