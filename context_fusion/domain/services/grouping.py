# Pure domain service: aggregate selected fragments per parent document.
from __future__ import annotations

from collections.abc import Sequence

from context_fusion.domain.models import Candidate, DocumentGroup


def group_by_parent(selection: Sequence[Candidate]) -> list[DocumentGroup]:
    """Group by parent key in first-appearance order.

    Text-less candidates add no chunk but still register their parent, and the
    first non-empty title seen for a parent wins.
    """
    titles: dict[str, str | None] = {}
    chunks: dict[str, list[str]] = {}
    for c in selection:
        key = c.parent_key
        if key not in chunks:
            chunks[key] = []
            titles[key] = None
        if c.text:
            chunks[key].append(c.text)
        if not titles[key] and c.title:
            titles[key] = c.title
    return [
        DocumentGroup(parent_id=key, title=titles[key], chunks=tuple(texts))
        for key, texts in chunks.items()
    ]
