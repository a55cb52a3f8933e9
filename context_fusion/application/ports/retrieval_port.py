"""Retrieval provider port.

Why: Providers return results in loosely-typed shapes (paged iterators,
dicts, SDK objects). Each adapter normalizes its own shape into Candidates
once, so the pipeline never branches on result shape.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from context_fusion.domain.models import Candidate
from context_fusion.domain.types import Vector
from context_fusion.domain.value_objects import SearchOptions

__all__ = ["Candidate", "RetrievalPort"]


@runtime_checkable
class RetrievalPort(Protocol):
    def search(
        self,
        query_text: str | None,
        vector: Vector,
        options: SearchOptions,
    ) -> list[Candidate]:
        """Issue one retrieval call and return candidates in native rank order.

        Args:
            query_text: Lexical query for hybrid search; None for vector-only
            vector: Query embedding, dimension must match the index field
            options: Fetch width, kNN count, hybrid flag

        Raises:
            RetrievalError: Provider call failed or returned an unusable shape
        """
        ...
