"""Tests for token estimation, safe trimming and budgeted stitching."""

import pytest

from context_fusion.domain.services.budgeting import (
    estimate_tokens,
    safe_trim_to_chars,
    stitch_with_token_budget,
)
from context_fusion.domain.services.condensing import format_block

# 46 chars
BLOCK_A = format_block("One two three.", "A")
# 89 chars
BLOCK_B = format_block("alpha beta gamma delta epsilon zeta eta theta iota kappa.", "B")


@pytest.mark.parametrize(
    "text,expected",
    [("", 0), (None, 0), ("abc", 1), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)],
)
def test_estimate_tokens(text: str | None, expected: int) -> None:
    assert estimate_tokens(text) == expected


@pytest.mark.parametrize(
    "text,limit,expected",
    [
        ("short", 10, "short"),
        ("abcdefghijklmnop", 10, "abcdefghi…"),
        ("ab cdefghijklmnop", 10, "ab cdefgh…"),  # break too early, hard cut
        ("word word word word word", 20, "word word word…"),
        ("anything", 0, ""),
    ],
)
def test_safe_trim_to_chars(text: str, limit: int, expected: str) -> None:
    trimmed = safe_trim_to_chars(text, limit)
    assert trimmed == expected
    assert len(trimmed) <= limit


def test_blocks_within_budget_are_kept_whole():
    result = stitch_with_token_budget([BLOCK_A, BLOCK_B], max_tokens=1000)
    assert result.stitched == f"{BLOCK_A}\n{BLOCK_B}"
    assert result.kept_blocks == 2
    assert result.trimmed is False
    assert result.used_tokens == estimate_tokens(result.stitched)


def test_last_block_is_trimmed_at_word_boundary():
    result = stitch_with_token_budget([BLOCK_A, BLOCK_B], max_tokens=25)
    assert result.stitched == (
        f'{BLOCK_A}\n<context source="B">\nalpha beta gamma…\n</context>'
    )
    assert result.trimmed is True
    assert result.kept_blocks == 2
    assert estimate_tokens(result.stitched) <= 25


def test_stops_after_trimmed_block():
    block_c = format_block("Never reached.", "C")
    result = stitch_with_token_budget([BLOCK_A, BLOCK_B, block_c], max_tokens=25)
    assert "Never reached." not in result.stitched


def test_block_without_room_for_wrapper_is_omitted():
    result = stitch_with_token_budget([BLOCK_A, BLOCK_B], max_tokens=12)
    assert result.stitched == BLOCK_A
    assert result.trimmed is False


def test_raw_block_without_delimiters_is_trimmed_directly():
    result = stitch_with_token_budget(["word " * 20], max_tokens=5)
    assert result.stitched == "word word word…"


@pytest.mark.parametrize("budget", [0, 1, 5, 11, 12, 13, 20, 25, 33, 34, 50, 1000])
def test_estimated_tokens_never_exceed_budget(budget: int) -> None:
    blocks = [BLOCK_A, BLOCK_B, BLOCK_A, "raw tail " * 10]
    result = stitch_with_token_budget(blocks, budget)
    assert estimate_tokens(result.stitched) <= budget
    assert result.used_tokens <= budget


def test_zero_budget_yields_empty_string():
    assert stitch_with_token_budget([BLOCK_A], 0).stitched == ""


def test_no_blocks():
    result = stitch_with_token_budget([], 100)
    assert result.stitched == ""
    assert result.kept_blocks == 0


def test_block_with_room_for_only_the_ellipsis_is_omitted():
    # 80 chars: BLOCK_A (46) + "\n" leaves 33, one inner char inside B's wrapper.
    block_b = format_block("alpha beta gamma delta.", "B")
    result = stitch_with_token_budget([BLOCK_A, block_b], max_tokens=20)
    assert result.stitched == BLOCK_A
    assert "\n…\n" not in result.stitched
    assert result.kept_blocks == 1
    assert result.trimmed is False


def test_raw_block_with_room_for_only_the_ellipsis_is_omitted():
    result = stitch_with_token_budget([BLOCK_A, "raw tail words"], max_tokens=12)
    assert result.stitched == BLOCK_A
    assert result.kept_blocks == 1


def test_small_inner_room_keeps_content_before_ellipsis():
    block_b = format_block("alpha beta gamma delta.", "B")
    # 84 chars leaves 37 for B: 32 for the wrapper and its newlines, 5 inner chars.
    result = stitch_with_token_budget([BLOCK_A, block_b], max_tokens=21)
    assert result.stitched == f'{BLOCK_A}\n<context source="B">\nalph…\n</context>'
    assert result.trimmed is True
