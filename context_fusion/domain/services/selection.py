# context_fusion/domain/services/selection.py
# Pure domain services: no I/O, deterministic, no external libraries.
from __future__ import annotations

from collections.abc import Sequence

from context_fusion.domain.models import Candidate


def sort_by_score_desc(candidates: Sequence[Candidate]) -> list[Candidate]:
    """Stable descending sort by score; equal scores keep provider order."""
    return sorted(candidates, key=lambda c: c.score or 0.0, reverse=True)


def select_diverse(
    candidates: Sequence[Candidate],
    max_per_parent: int,
    max_total: int,
) -> list[Candidate]:
    """
    Single left-to-right pass enforcing a per-parent cap and a global cap.

    - Output preserves input order (no re-sorting).
    - len(output) <= max_total.
    - No parent contributes more than max_per_parent entries.
    """
    if max_per_parent <= 0 or max_total <= 0:
        return []

    per_parent: dict[str, int] = {}
    out: list[Candidate] = []
    for c in candidates:
        n = per_parent.get(c.parent_key, 0)
        if n >= max_per_parent:
            continue
        out.append(c)
        per_parent[c.parent_key] = n + 1
        if len(out) >= max_total:
            break
    return out
