# context_fusion/application/use_cases/build_grounded_context.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from context_fusion.application.dto.context_dto import ContextBundle, ContextRequest
from context_fusion.application.ports.embedding_port import EmbeddingPort
from context_fusion.application.ports.retrieval_port import RetrievalPort
from context_fusion.application.ports.telemetry_port import TelemetryPort
from context_fusion.application.services.candidate_retriever import CandidateRetriever
from context_fusion.domain.errors import DomainError, EmbeddingError
from context_fusion.domain.services.budgeting import stitch_with_token_budget
from context_fusion.domain.services.condensing import build_blocks
from context_fusion.domain.services.confidence import evaluate_confidence
from context_fusion.domain.services.grouping import group_by_parent
from context_fusion.domain.services.query import augment_query
from context_fusion.domain.services.selection import select_diverse, sort_by_score_desc
from context_fusion.domain.types import Result
from context_fusion.domain.value_objects import ContextConfig

logger = logging.getLogger(__name__)


class BuildGroundedContext:
    """
    Application use case: query -> embed -> retrieve -> gate -> select ->
    group/dedupe/condense -> format -> stitch under a token budget.

    Every call allocates its own intermediate state; instances hold only
    immutable config and ports, so concurrent calls need no coordination.
    Failures come back as Result.failure; a declined gate is a success with
    an empty bundle.
    """

    def __init__(
        self,
        embedding: EmbeddingPort,
        retrieval: RetrievalPort,
        config: ContextConfig | None = None,
        telemetry: TelemetryPort | None = None,
        expected_dimension: int | None = None,
    ) -> None:
        self.embedding = embedding
        self.config = config or ContextConfig()
        self.retriever = CandidateRetriever(retrieval, self.config, expected_dimension)
        self.telemetry = telemetry

    def execute(self, req: ContextRequest) -> Result[ContextBundle, DomainError]:
        self._incr("context.requests")

        # 1) Router said no, or nothing to search for
        if not req.should_search:
            return self._declined(ContextBundle.empty("not_requested"))
        if not req.question or not req.question.strip():
            return self._declined(ContextBundle.empty("empty_query"))

        query = augment_query(req.question, req.keywords)
        logger.debug("building context keywords=%s", ", ".join(req.keywords) or "(none)")

        # 2) Embed
        try:
            vector = self.embedding.embed_query(query)
        except Exception as ex:  # noqa: BLE001
            return self._failed(
                ex if isinstance(ex, EmbeddingError) else EmbeddingError(f"embedding failed: {ex}")
            )
        if not vector:
            return self._failed(EmbeddingError("embedding provider returned no vector"))

        # 3) Retrieve (native order, optional one-time score sort)
        try:
            candidates = self.retriever.retrieve(query, vector)
        except DomainError as ex:
            return self._failed(ex)
        if self.config.sort_by_score:
            candidates = sort_by_score_desc(candidates)
        self._observe("context.candidates", len(candidates))

        # 4) Confidence gate on native scores
        gate = evaluate_confidence(
            candidates, self.config.min_top_score, self.config.min_score_gap
        )
        if candidates:
            self._observe("context.top_score", gate.top_score)
        if gate.declined:
            return self._declined(
                ContextBundle.empty(
                    "low_confidence",
                    candidate_count=len(candidates),
                    top_score=gate.top_score if candidates else None,
                )
            )

        # 5) Diversity & total limits on the ranked order
        picked = select_diverse(
            candidates, self.config.max_per_parent, self.config.max_total_after_fusion
        )
        self._observe("context.selected", len(picked))

        # 6) Group, normalize, dedupe, condense, format
        blocks = build_blocks(
            group_by_parent(picked),
            self.config.max_sentences,
            self.config.untitled_placeholder,
        )

        # 7) Global token budget
        stitched = stitch_with_token_budget(
            [b.text for b in blocks], self.config.max_context_tokens
        )
        self._observe("context.blocks", stitched.kept_blocks)
        self._observe("context.tokens", stitched.used_tokens)
        logger.info(
            "context built: %d/%d blocks, %d tokens, trimmed=%s",
            stitched.kept_blocks,
            len(blocks),
            stitched.used_tokens,
            stitched.trimmed,
        )

        bundle = ContextBundle(
            text=stitched.stitched,
            blocks=stitched.kept_blocks,
            used_tokens=stitched.used_tokens,
            candidate_count=len(candidates),
            selected_count=len(picked),
            top_score=gate.top_score,
            reason=None if stitched.stitched else "no_content",
        )
        return Result.success(bundle)

    def render_context(self, question: str, keywords: Sequence[str] = ()) -> str:
        """Return the context string ("" when declined); raise the domain error on failure."""
        result = self.execute(ContextRequest(question=question, keywords=tuple(keywords)))
        if not result.ok:
            assert result.error is not None
            raise result.error
        assert result.value is not None
        return result.value.text

    # ===== Helpers =====

    def _declined(self, bundle: ContextBundle) -> Result[ContextBundle, DomainError]:
        logger.info("context declined: %s", bundle.reason)
        self._incr("context.declined", {"reason": bundle.reason})
        return Result.success(bundle)

    def _failed(self, err: DomainError) -> Result[ContextBundle, DomainError]:
        logger.warning("context pipeline failed: %s: %s", type(err).__name__, err)
        self._incr("context.errors", {"error_type": type(err).__name__})
        return Result.failure(err)

    def _incr(self, name: str, tags: dict[str, Any] | None = None) -> None:
        if self.telemetry is not None:
            self.telemetry.incr(name, tags)

    def _observe(self, name: str, value: float) -> None:
        if self.telemetry is not None:
            self.telemetry.observe(name, value)
