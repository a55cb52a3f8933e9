# context_fusion/application/dto/context_dto.py
from __future__ import annotations

from dataclasses import dataclass

from context_fusion.domain.models import SearchDecision


@dataclass(frozen=True)
class ContextRequest:
    """
    DTO for building grounded context for one turn.

    - question: raw user text
    - keywords: router focus terms appended to the query before embedding
    - should_search: router decision; False skips retrieval entirely
    """

    question: str
    keywords: tuple[str, ...] = ()
    should_search: bool = True

    @classmethod
    def from_decision(cls, question: str, decision: SearchDecision) -> ContextRequest:
        return cls(
            question=question,
            keywords=tuple(decision.keywords),
            should_search=decision.should_search,
        )


@dataclass(frozen=True)
class ContextBundle:
    """Stitched context plus the numbers behind it.

    An empty ``text`` means "no sufficiently confident context"; ``reason``
    says why (``not_requested``, ``empty_query``, ``low_confidence``,
    ``no_content``).
    """

    text: str
    blocks: int = 0
    used_tokens: int = 0
    candidate_count: int = 0
    selected_count: int = 0
    top_score: float | None = None
    declined: bool = False
    reason: str | None = None

    @classmethod
    def empty(
        cls, reason: str, candidate_count: int = 0, top_score: float | None = None
    ) -> ContextBundle:
        return cls(
            text="",
            candidate_count=candidate_count,
            top_score=top_score,
            declined=True,
            reason=reason,
        )
