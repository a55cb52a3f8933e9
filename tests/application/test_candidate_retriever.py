"""Tests for CandidateRetriever error mapping and fetch width."""

from collections.abc import Sequence

import pytest

from context_fusion.application.services.candidate_retriever import CandidateRetriever
from context_fusion.domain.errors import RetrievalError
from context_fusion.domain.models import Candidate
from context_fusion.domain.types import Vector
from context_fusion.domain.value_objects import ContextConfig, SearchOptions


class ListProvider:
    def __init__(self, items: list[Candidate]) -> None:
        self.items = items
        self.options: SearchOptions | None = None

    def search(
        self, query_text: str | None, vector: Sequence[float], options: SearchOptions
    ) -> list[Candidate]:
        self.options = options
        return list(self.items)  # ignores top on purpose


class BrokenProvider:
    def search(self, query_text, vector, options):  # type: ignore[no-untyped-def]
        raise TimeoutError("provider timed out")


def test_explicit_top_k_overrides_fetch_width():
    items = [Candidate(id=f"c{i}", score=1.0 - i / 10) for i in range(8)]
    provider = ListProvider(items)
    retriever = CandidateRetriever(provider, ContextConfig(top_per_variant=12))

    out = retriever.retrieve("q", [0.0, 1.0], top_k=3)

    assert [c.id for c in out] == ["c0", "c1", "c2"]
    assert provider.options == SearchOptions(top=3, k_nearest_neighbors_count=16, hybrid=True)


def test_native_order_is_kept():
    items = [Candidate(id="b", score=0.1), Candidate(id="a", score=0.9)]
    retriever = CandidateRetriever(ListProvider(items), ContextConfig())
    assert [c.id for c in retriever.retrieve("q", [1.0])] == ["b", "a"]


def test_provider_errors_are_wrapped():
    retriever = CandidateRetriever(BrokenProvider(), ContextConfig())
    with pytest.raises(RetrievalError) as exc_info:
        retriever.retrieve("q", [1.0])
    assert isinstance(exc_info.value.__cause__, TimeoutError)


def test_dimension_check():
    retriever = CandidateRetriever(ListProvider([]), ContextConfig(), expected_dimension=2)
    assert retriever.retrieve("q", [1.0, 0.0]) == []
    with pytest.raises(RetrievalError):
        retriever.retrieve("q", [1.0, 0.0, 0.0])


def test_zero_top_k_is_not_replaced_by_default_width():
    provider = ListProvider([Candidate(id="c0", score=0.9)])
    retriever = CandidateRetriever(provider, ContextConfig(top_per_variant=12))

    out = retriever.retrieve("q", [0.0, 1.0], top_k=0)

    assert out == []
    assert provider.options is not None
    assert provider.options.top == 0


def test_tuple_vectors_are_accepted():
    provider = ListProvider([Candidate(id="c0", score=0.4)])
    retriever = CandidateRetriever(provider, ContextConfig(), expected_dimension=3)
    vector: Vector = (0.1, 0.2, 0.3)

    out = retriever.retrieve("q", vector)

    assert [c.id for c in out] == ["c0"]
