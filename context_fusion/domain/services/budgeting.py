"""Global token budget across context blocks.

Why: The prompt has a fixed room for retrieved context. Blocks are kept whole
while they fit; the first block that does not fit is trimmed at a clean
boundary (wrapper tags preserved) and stitching stops there.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from context_fusion.domain.services.condensing import CONTEXT_CLOSE

CHARS_PER_TOKEN = 4
ELLIPSIS = "…"
SEPARATOR = "\n"
# A break earlier than this share of the target length is not worth taking.
MIN_BREAK_RATIO = 0.6


@dataclass(frozen=True)
class StitchResult:
    stitched: str
    used_tokens: int
    kept_blocks: int
    trimmed: bool = False


def estimate_tokens(text: str | None) -> int:
    """Very light token estimator (~4 chars/token), not a real tokenizer."""
    return math.ceil(len(text or "") / CHARS_PER_TOKEN)


def safe_trim_to_chars(s: str, max_chars: int) -> str:
    """Trim to at most ``max_chars`` characters, preferring a whitespace break.

    The result ends with an ellipsis whenever text was removed.
    """
    if len(s) <= max_chars:
        return s
    if max_chars <= 0:
        return ""
    head = s[: max_chars - 1]
    last_break = max(head.rfind("\n"), head.rfind(" "), head.rfind("\t"))
    cut = head[:last_break] if last_break > max_chars * MIN_BREAK_RATIO else head
    return cut.rstrip(" \t\r\n") + ELLIPSIS


def _split_wrapper(block: str) -> tuple[str, str, str] | None:
    open_end = block.find(">")
    close_start = block.rfind(CONTEXT_CLOSE)
    if open_end == -1 or close_start == -1 or close_start <= open_end:
        return None
    return block[: open_end + 1], block[open_end + 1 : close_start], block[close_start:]


def _has_content(trimmed: str) -> bool:
    return bool(trimmed.rstrip(ELLIPSIS))


def _trim_block(block: str, max_chars: int) -> str:
    """Trim a block to ``max_chars``; "" when no content char survives the cut."""
    parts = _split_wrapper(block)
    if parts is None:
        trimmed = safe_trim_to_chars(block, max_chars)
        return trimmed if _has_content(trimmed) else ""

    head, body, tail = parts
    inner = body.strip("\n")
    # Room for head + "\n" + inner + "\n" + tail.
    inner_room = max_chars - len(head) - len(tail) - 2
    if inner_room < 1:
        return ""
    trimmed = safe_trim_to_chars(inner, inner_room)
    if not _has_content(trimmed):
        return ""
    return f"{head}\n{trimmed}\n{tail}"


def stitch_with_token_budget(blocks: Sequence[str], max_tokens: int) -> StitchResult:
    """Join blocks with newlines so that estimate_tokens(result) <= max_tokens.

    The separator is charged to the block that follows it.
    """
    out: list[str] = []
    used_chars = 0
    trimmed = False
    budget_chars = max(0, max_tokens) * CHARS_PER_TOKEN
    for block in blocks:
        sep = len(SEPARATOR) if out else 0
        if used_chars + sep + len(block) <= budget_chars:
            out.append(block)
            used_chars += sep + len(block)
            continue

        room = budget_chars - used_chars - sep
        piece = _trim_block(block, room) if room > 0 else ""
        if piece:
            out.append(piece)
            trimmed = True
        break

    stitched = SEPARATOR.join(out)
    return StitchResult(
        stitched=stitched,
        used_tokens=estimate_tokens(stitched),
        kept_blocks=len(out),
        trimmed=trimmed,
    )
