from dataclasses import dataclass, field
from importlib import import_module
from typing import Any

from context_fusion.application.ports.retrieval_port import Candidate, RetrievalPort
from context_fusion.domain.errors import RetrievalError
from context_fusion.domain.types import Vector
from context_fusion.domain.value_objects import SearchOptions


@dataclass
class QdrantRetrievalAdapter(RetrievalPort):
    """Vector-only retrieval over a Qdrant collection.

    Qdrant has no lexical signal here, so ``query_text`` is ignored. Payload
    keys mirror the Azure index field names.
    """

    url: str = "http://localhost:6333"
    collection: str = "kb_chunks"
    api_key: str | None = None
    timeout_s: int = 30
    parent_key: str = "parent_id"
    title_key: str = "title"
    text_key: str = "chunk"
    _cli: Any | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            client_mod = import_module("qdrant_client")
            QdrantClient = client_mod.QdrantClient
        except Exception as ex:  # pragma: no cover
            raise RetrievalError("qdrant-client not available; install runtime deps") from ex
        self._cli = QdrantClient(url=self.url, api_key=self.api_key or None, timeout=self.timeout_s)

    def search(
        self,
        query_text: str | None,
        vector: Vector,
        options: SearchOptions,
    ) -> list[Candidate]:
        if self._cli is None:
            raise RetrievalError("Qdrant client not initialized")
        try:
            rs: Any = self._cli.query_points(
                collection_name=self.collection,
                query=list(vector),
                limit=options.top,
                with_payload=True,
            )
            points = getattr(rs, "points", rs)
            return [
                Candidate(
                    id=str(p.id),
                    parent_id=(p.payload or {}).get(self.parent_key),
                    title=(p.payload or {}).get(self.title_key),
                    text=(p.payload or {}).get(self.text_key),
                    score=float(p.score or 0.0),
                )
                for p in points
            ]
        except Exception as ex:  # noqa: BLE001
            raise RetrievalError(f"Search failed: {ex}") from ex
