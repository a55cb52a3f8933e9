"""Sentence-Transformers embedding adapter for local/offline deployments."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from importlib import import_module
from typing import Any, cast

from context_fusion.application.ports.embedding_port import EmbeddingPort
from context_fusion.domain.errors import EmbeddingError


@dataclass
class HFEmbeddingAdapter(EmbeddingPort):
    """HuggingFace Sentence-Transformers adapter.

    The model must produce vectors of the index's vector-field dimension.
    """

    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "cpu"  # switch to "cuda" when available
    local_files_only: bool = False  # support offline deployments
    query_prefix: str = ""  # e.g. "query: " for E5 models
    _model: Any | None = field(default=None, init=False, repr=False)

    def _ensure_model(self) -> Any:
        if self._model is not None:
            return self._model
        try:
            st_module = import_module("sentence_transformers")
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError("sentence-transformers not installed.") from ex
        try:
            self._model = st_module.SentenceTransformer(
                self.model_name,
                device=self.device,
                local_files_only=self.local_files_only,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(
                f"Failed to load embedding model '{self.model_name}': {ex}"
            ) from ex
        return self._model

    def embed_query(self, text: str) -> list[float]:
        model = self._ensure_model()
        try:
            raw_vector = model.encode(
                f"{self.query_prefix}{text}",
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(f"Embedding query failed: {ex}") from ex
        vector = cast(Sequence[float], raw_vector)
        return [float(x) for x in vector]
