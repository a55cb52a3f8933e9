"""Confidence gate over native provider scores.

Why: Refuse to build context when evidence is both sparse and ambiguous.
A weak result with a clear winner still passes; so does any result set with
three or more candidates.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from context_fusion.domain.models import Candidate
from context_fusion.domain.types import Score

logger = logging.getLogger(__name__)

# At or above this many candidates the evidence counts as corroborated.
CORROBORATING_COUNT = 3


@dataclass(frozen=True)
class GateDecision:
    declined: bool
    top_score: Score
    second_score: Score
    low_top: bool = False
    small_gap: bool = False


def evaluate_confidence(
    candidates: Sequence[Candidate],
    min_top_score: float,
    min_score_gap: float,
) -> GateDecision:
    if not candidates:
        return GateDecision(declined=True, top_score=0.0, second_score=0.0)

    top = candidates[0].score or 0.0
    second = (candidates[1].score or 0.0) if len(candidates) > 1 else 0.0
    if len(candidates) >= CORROBORATING_COUNT:
        return GateDecision(declined=False, top_score=top, second_score=second)

    low_top = top < min_top_score
    small_gap = (top - second) < min_score_gap
    logger.debug(
        "gate top=%s second=%s parents=%d low_top=%s small_gap=%s",
        top,
        second,
        len({c.parent_key for c in candidates}),
        low_top,
        small_gap,
    )
    return GateDecision(
        declined=low_top and small_gap,
        top_score=top,
        second_score=second,
        low_top=low_top,
        small_gap=small_gap,
    )


def should_decline(
    candidates: Sequence[Candidate],
    min_top_score: float,
    min_score_gap: float,
) -> bool:
    """True when the candidates are too weak to answer from."""
    return evaluate_confidence(candidates, min_top_score, min_score_gap).declined
