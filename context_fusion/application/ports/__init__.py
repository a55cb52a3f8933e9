"""Application ports package."""

from context_fusion.application.ports.embedding_port import EmbeddingPort
from context_fusion.application.ports.retrieval_port import Candidate, RetrievalPort
from context_fusion.application.ports.telemetry_port import TelemetryPort

__all__ = [
    "Candidate",
    "EmbeddingPort",
    "RetrievalPort",
    "TelemetryPort",
]
