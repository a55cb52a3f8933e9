"""Composition root: the only place that instantiates infrastructure adapters."""

from dataclasses import replace

from context_fusion.application.ports.embedding_port import EmbeddingPort
from context_fusion.application.ports.retrieval_port import RetrievalPort
from context_fusion.application.ports.telemetry_port import TelemetryPort
from context_fusion.application.use_cases.build_grounded_context import BuildGroundedContext
from context_fusion.config.settings import AppSettings
from context_fusion.domain.errors import ValidationError
from context_fusion.infrastructure.embeddings.azure_openai_adapter import (
    AzureOpenAIEmbeddingAdapter,
)
from context_fusion.infrastructure.embeddings.hf_sentence_transformers import HFEmbeddingAdapter
from context_fusion.infrastructure.retrieval.azure_search_adapter import (
    AzureAISearchAdapter,
    AzureSearchFields,
)
from context_fusion.infrastructure.retrieval.qdrant_adapter import QdrantRetrievalAdapter


def build_embedding(settings: AppSettings) -> EmbeddingPort:
    backend = settings.embedding_backend

    if backend == "azure_openai":
        return AzureOpenAIEmbeddingAdapter(
            endpoint=settings.azure_openai_endpoint,
            api_key=settings.azure_openai_api_key,
            deployment=settings.azure_openai_embedding_deployment,
            api_version=settings.azure_openai_api_version,
        )

    if backend == "hf":
        return HFEmbeddingAdapter(
            model_name=settings.hf_model,
            device=settings.hf_device,
            local_files_only=settings.hf_local_files_only,
            query_prefix=settings.hf_query_prefix,
        )

    raise ValidationError(f"unknown EMBEDDING_BACKEND '{backend}'")


def build_retrieval(settings: AppSettings) -> RetrievalPort:
    backend = settings.retrieval_backend

    if backend == "azure_search":
        return AzureAISearchAdapter(
            endpoint=settings.azure_search_endpoint,
            index_name=settings.azure_search_index,
            api_key=settings.azure_search_api_key,
            fields=AzureSearchFields(
                id=settings.field_id,
                parent_id=settings.field_parent_id,
                title=settings.field_title,
                text=settings.field_text,
                vector=settings.field_vector,
            ),
        )

    if backend == "qdrant":
        return QdrantRetrievalAdapter(
            url=settings.qdrant_url,
            collection=settings.qdrant_collection,
            api_key=settings.qdrant_api_key or None,
            timeout_s=settings.qdrant_timeout_s,
            parent_key=settings.field_parent_id,
            title_key=settings.field_title,
            text_key=settings.field_text,
        )

    raise ValidationError(f"unknown RETRIEVAL_BACKEND '{backend}'")


def build_telemetry(settings: AppSettings) -> TelemetryPort | None:
    """OpenTelemetry adapter when TELEMETRY_ENABLED=true, else None."""
    if not settings.telemetry_enabled:
        return None

    from context_fusion.infrastructure.telemetry.otel_adapter import (
        OpenTelemetryAdapter,
        OtelConfig,
    )

    cfg = OtelConfig(
        service_name="context-fusion",
        otlp_endpoint=settings.otlp_endpoint or None,
        environment=settings.telemetry_environment,
        enable_console=False,
    )
    return OpenTelemetryAdapter(cfg)


def build_context_use_case(
    settings: AppSettings | None = None,
    max_context_tokens: int | None = None,
) -> BuildGroundedContext:
    """Build the context pipeline.

    Args:
        settings: Settings to wire from (default: load from environment)
        max_context_tokens: Optional override of the configured token budget
    """
    settings = settings or AppSettings()
    config = settings.context_config()
    if max_context_tokens is not None:
        config = replace(config, max_context_tokens=max_context_tokens)
    return BuildGroundedContext(
        embedding=build_embedding(settings),
        retrieval=build_retrieval(settings),
        config=config,
        telemetry=build_telemetry(settings),
        expected_dimension=settings.embedding_dimension or None,
    )
