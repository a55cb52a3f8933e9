"""CandidateRetriever: one retrieval call, errors mapped to the domain."""

from __future__ import annotations

import logging

from context_fusion.application.ports.retrieval_port import RetrievalPort
from context_fusion.domain.errors import DomainError, RetrievalError
from context_fusion.domain.models import Candidate
from context_fusion.domain.types import Vector
from context_fusion.domain.value_objects import ContextConfig, SearchOptions

logger = logging.getLogger(__name__)


class CandidateRetriever:
    """Issues a single (hybrid or vector-only) retrieval call.

    No retries: resilience policy belongs to the caller.
    """

    def __init__(
        self,
        provider: RetrievalPort,
        config: ContextConfig,
        expected_dimension: int | None = None,
    ) -> None:
        self.provider = provider
        self.config = config
        self.expected_dimension = expected_dimension

    def retrieve(
        self, query: str, vector: Vector, top_k: int | None = None
    ) -> list[Candidate]:
        if self.expected_dimension and len(vector) != self.expected_dimension:
            raise RetrievalError(
                f"vector dimension {len(vector)} does not match index "
                f"dimension {self.expected_dimension}"
            )
        options = SearchOptions(
            top=top_k if top_k is not None else self.config.top_per_variant,
            k_nearest_neighbors_count=self.config.k_nearest_neighbors_count,
            hybrid=self.config.hybrid,
        )
        query_text = query if options.hybrid else None
        try:
            candidates = list(self.provider.search(query_text, vector, options))
        except DomainError:
            raise
        except Exception as ex:  # noqa: BLE001
            raise RetrievalError(f"retrieval failed: {ex}") from ex
        logger.debug("retrieved %d candidates (top=%d)", len(candidates), options.top)
        return candidates[: options.top]
