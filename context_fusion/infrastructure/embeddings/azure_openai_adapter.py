from dataclasses import dataclass
from importlib import import_module
from typing import Any

from context_fusion.application.ports.embedding_port import EmbeddingPort
from context_fusion.domain.errors import EmbeddingError


@dataclass
class AzureOpenAIEmbeddingAdapter(EmbeddingPort):
    endpoint: str  # e.g. "https://my-resource.openai.azure.com"
    api_key: str
    deployment: str = "text-embedding-ada-002"
    api_version: str = "2024-02-01"

    def __post_init__(self) -> None:
        # Defer import of OpenAI to first use to avoid hard dependency in tests
        self._client: Any | None = None

    def _ensure_client(self) -> Any:
        if self._client is None:
            try:
                module = import_module("openai")
            except Exception as ex:  # pragma: no cover
                raise EmbeddingError("openai not available; install runtime deps") from ex
            self._client = module.AzureOpenAI(
                api_key=self.api_key,
                azure_endpoint=self.endpoint,
                api_version=self.api_version,
            )
        return self._client

    def embed_query(self, text: str) -> list[float]:
        client = self._ensure_client()
        try:
            resp: Any = client.embeddings.create(input=text, model=self.deployment)
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            raise EmbeddingError(f"Embedding request failed: {ex}") from ex
        data = getattr(resp, "data", None)
        if not data:
            raise EmbeddingError("Failed to generate embeddings for text.")
        return [float(x) for x in data[0].embedding]
