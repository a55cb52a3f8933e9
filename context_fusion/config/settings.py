"""Application settings with environment-driven configuration.

Why: Single place that reads the environment; every other layer receives
settings via dependency injection.
"""

import os
from dataclasses import dataclass, field

from context_fusion.domain.value_objects import ContextConfig


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables.

    This is the ONLY place where environment variables are read.
    """

    # ===== Embedding Configuration =====
    embedding_backend: str = field(
        default_factory=lambda: os.getenv("EMBEDDING_BACKEND", "azure_openai").lower()
    )
    # Supported: "azure_openai" | "hf"

    azure_openai_endpoint: str = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_ENDPOINT", "")
    )
    azure_openai_api_key: str = field(default_factory=lambda: os.getenv("AZURE_OPENAI_API_KEY", ""))
    azure_openai_embedding_deployment: str = field(
        default_factory=lambda: os.getenv(
            "AZURE_OPENAI_EMBEDDING_DEPLOYMENT", "text-embedding-ada-002"
        )
    )
    azure_openai_api_version: str = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-01")
    )

    hf_model: str = field(
        default_factory=lambda: os.getenv(
            "HF_EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"
        )
    )
    hf_device: str = field(default_factory=lambda: os.getenv("HF_EMBEDDING_DEVICE", "cpu"))
    # Supported: "cpu" | "cuda" | "mps"
    hf_local_files_only: bool = field(
        default_factory=lambda: _flag("HF_LOCAL_FILES_ONLY", "false")
    )
    hf_query_prefix: str = field(default_factory=lambda: os.getenv("HF_QUERY_PREFIX", ""))
    # e.g. "query: " for E5 models

    embedding_dimension: int = field(
        default_factory=lambda: int(os.getenv("EMBEDDING_DIMENSION", "0"))
    )
    # 0 = do not check; otherwise must equal the index vector field dimension (e.g. 1536)

    # ===== Retrieval Configuration =====
    retrieval_backend: str = field(
        default_factory=lambda: os.getenv("RETRIEVAL_BACKEND", "azure_search").lower()
    )
    # Supported: "azure_search" | "qdrant"

    azure_search_endpoint: str = field(
        default_factory=lambda: os.getenv("AZURE_SEARCH_ENDPOINT", "")
    )
    azure_search_api_key: str = field(default_factory=lambda: os.getenv("AZURE_SEARCH_API_KEY", ""))
    azure_search_index: str = field(default_factory=lambda: os.getenv("AZURE_SEARCH_INDEX", ""))
    field_id: str = field(default_factory=lambda: os.getenv("SEARCH_FIELD_ID", "chunk_id"))
    field_parent_id: str = field(
        default_factory=lambda: os.getenv("SEARCH_FIELD_PARENT_ID", "parent_id")
    )
    field_title: str = field(default_factory=lambda: os.getenv("SEARCH_FIELD_TITLE", "title"))
    field_text: str = field(default_factory=lambda: os.getenv("SEARCH_FIELD_TEXT", "chunk"))
    field_vector: str = field(
        default_factory=lambda: os.getenv("SEARCH_FIELD_VECTOR", "text_vector")
    )

    qdrant_url: str = field(
        default_factory=lambda: os.getenv("QDRANT_URL", "http://localhost:6333")
    )
    qdrant_api_key: str = field(default_factory=lambda: os.getenv("QDRANT_API_KEY", ""))
    qdrant_collection: str = field(
        default_factory=lambda: os.getenv("QDRANT_COLLECTION", "kb_chunks")
    )
    qdrant_timeout_s: int = field(default_factory=lambda: int(os.getenv("QDRANT_TIMEOUT_S", "30")))

    # ===== Context Pipeline Configuration =====
    k_nearest_neighbors_count: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_KNN_COUNT", "16"))
    )
    top_per_variant: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_TOP_PER_VARIANT", "12"))
    )
    max_per_parent: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_MAX_PER_PARENT", "4"))
    )
    max_total_after_fusion: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_MAX_TOTAL", "6"))
    )
    min_top_score: float = field(
        default_factory=lambda: float(os.getenv("CONTEXT_MIN_TOP_SCORE", "0.12"))
    )
    min_score_gap: float = field(
        default_factory=lambda: float(os.getenv("CONTEXT_MIN_SCORE_GAP", "0.01"))
    )
    # Score thresholds are provider-scale specific; recalibrate per deployment

    max_context_tokens: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_MAX_TOKENS", "1200"))
    )
    max_sentences: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_MAX_SENTENCES", "4"))
    )
    hybrid: bool = field(default_factory=lambda: _flag("CONTEXT_HYBRID", "true"))
    sort_by_score: bool = field(default_factory=lambda: _flag("CONTEXT_SORT_BY_SCORE", "false"))

    # ===== Telemetry / Logging =====
    telemetry_enabled: bool = field(default_factory=lambda: _flag("TELEMETRY_ENABLED", "false"))
    otlp_endpoint: str = field(default_factory=lambda: os.getenv("OTLP_ENDPOINT", ""))
    # Empty string = no OTLP export
    telemetry_environment: str = field(
        default_factory=lambda: os.getenv("TELEMETRY_ENVIRONMENT", "production")
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())

    def context_config(self) -> ContextConfig:
        """Build the validated, immutable pipeline configuration."""
        return ContextConfig(
            k_nearest_neighbors_count=self.k_nearest_neighbors_count,
            top_per_variant=self.top_per_variant,
            max_per_parent=self.max_per_parent,
            max_total_after_fusion=self.max_total_after_fusion,
            min_top_score=self.min_top_score,
            min_score_gap=self.min_score_gap,
            max_context_tokens=self.max_context_tokens,
            max_sentences=self.max_sentences,
            hybrid=self.hybrid,
            sort_by_score=self.sort_by_score,
        )
