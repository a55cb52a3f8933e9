from __future__ import annotations

import math
from dataclasses import dataclass

from context_fusion.domain.errors import ValidationError


@dataclass(frozen=True)
class ContextConfig:
    """Immutable pipeline configuration, validated once at construction.

    Score thresholds depend on the provider's score scale. The defaults were
    tuned for Azure AI Search hybrid scores and must be recalibrated per
    deployment.
    """

    k_nearest_neighbors_count: int = 16
    top_per_variant: int = 12  # retrieval fetch width
    max_per_parent: int = 4
    max_total_after_fusion: int = 6
    min_top_score: float = 0.12
    min_score_gap: float = 0.01
    max_context_tokens: int = 1200
    max_sentences: int = 4
    hybrid: bool = True
    sort_by_score: bool = False
    untitled_placeholder: str = "(untitled)"

    def __post_init__(self) -> None:
        for name in (
            "k_nearest_neighbors_count",
            "top_per_variant",
            "max_per_parent",
            "max_total_after_fusion",
            "max_context_tokens",
            "max_sentences",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValidationError(f"{name} must be a positive integer, got {value!r}")
        for name in ("min_top_score", "min_score_gap"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValidationError(f"{name} must be a finite number, got {value!r}")
        if self.min_score_gap < 0:
            raise ValidationError("min_score_gap must be >= 0")
        if not self.untitled_placeholder.strip():
            raise ValidationError("untitled_placeholder must not be blank")


@dataclass(frozen=True)
class SearchOptions:
    """Options handed to a retrieval provider for one call."""

    top: int
    k_nearest_neighbors_count: int
    hybrid: bool = True
