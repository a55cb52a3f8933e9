"""Azure AI Search retrieval adapter (hybrid text + vector, no semantic ranker).

Why: One search call per query; the index's native ranking and
``@search.score`` are passed through untouched for the confidence gate.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from importlib import import_module
from typing import Any

from context_fusion.application.ports.retrieval_port import Candidate, RetrievalPort
from context_fusion.domain.errors import RetrievalError
from context_fusion.domain.types import Vector
from context_fusion.domain.value_objects import SearchOptions


@dataclass(frozen=True)
class AzureSearchFields:
    """Index field names (chunked OneDrive/SharePoint import layout by default)."""

    id: str = "chunk_id"
    parent_id: str = "parent_id"
    title: str = "title"
    text: str = "chunk"
    vector: str = "text_vector"


@dataclass
class AzureAISearchAdapter(RetrievalPort):
    endpoint: str
    index_name: str
    api_key: str
    fields: AzureSearchFields = field(default_factory=AzureSearchFields)
    _client: Any | None = field(default=None, init=False, repr=False)

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client
        try:
            documents_mod = import_module("azure.search.documents")
            credentials_mod = import_module("azure.core.credentials")
        except Exception as ex:  # pragma: no cover
            raise RetrievalError(
                "azure-search-documents not available; install runtime deps"
            ) from ex
        self._client = documents_mod.SearchClient(
            endpoint=self.endpoint,
            index_name=self.index_name,
            credential=credentials_mod.AzureKeyCredential(self.api_key),
        )
        return self._client

    def search(
        self,
        query_text: str | None,
        vector: Vector,
        options: SearchOptions,
    ) -> list[Candidate]:
        client = self._ensure_client()
        try:
            models_mod = import_module("azure.search.documents.models")
            vector_query = models_mod.VectorizedQuery(
                vector=list(vector),
                k_nearest_neighbors=options.k_nearest_neighbors_count,
                fields=self.fields.vector,
            )
            results: Any = client.search(
                search_text=query_text if options.hybrid else None,
                top=options.top,
                search_fields=[self.fields.title, self.fields.text],
                select=[self.fields.id, self.fields.parent_id, self.fields.title, self.fields.text],
                query_type="simple",
                search_mode="all",
                vector_queries=[vector_query],
            )
            return self._collect(results)
        except RetrievalError:
            raise
        except Exception as ex:  # noqa: BLE001
            raise RetrievalError(f"Azure AI Search query failed: {ex}") from ex

    def _collect(self, results: Any) -> list[Candidate]:
        """Collect search results, preserving Azure Search's native ranking."""
        items = getattr(results, "results", results)
        if not isinstance(items, Iterable) or isinstance(items, (str, bytes, Mapping)):
            raise RetrievalError(f"Unrecognized search result shape: {type(results).__name__}")
        return [self._to_candidate(item) for item in items]

    def _to_candidate(self, item: Any) -> Candidate:
        if not isinstance(item, Mapping):
            raise RetrievalError(f"Unrecognized search result item: {type(item).__name__}")
        # Items are flat documents, or {"document": {...}, "score": ...} wrappers
        doc = item.get("document")
        if not isinstance(doc, Mapping):
            doc = item
        score = item.get("@search.score", item.get("score"))
        f = self.fields
        return Candidate(
            id=str(doc.get(f.id) or ""),
            parent_id=_opt_str(doc.get(f.parent_id)),
            title=_opt_str(doc.get(f.title)),
            text=_opt_str(doc.get(f.text)),
            score=float(score) if score is not None else 0.0,
        )


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)
