"""CLI for building grounded context from the configured index."""

import argparse
import logging
import sys

from context_fusion.application.dto.context_dto import ContextRequest
from context_fusion.config.composition import build_context_use_case
from context_fusion.config.settings import AppSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-fusion",
        description="Build a token-bounded, citation-tagged context for a question.",
    )
    parser.add_argument("--question", required=True)
    parser.add_argument(
        "--keyword",
        action="append",
        default=[],
        help="Focus term appended to the query (repeatable)",
    )
    parser.add_argument("--no-search", action="store_true", help="Router decided not to search")
    parser.add_argument("--max-tokens", type=int, default=None, help="Override token budget")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uc = build_context_use_case(settings, max_context_tokens=args.max_tokens)
    req = ContextRequest(
        question=args.question,
        keywords=tuple(args.keyword),
        should_search=not args.no_search,
    )
    result = uc.execute(req)

    if result.ok and result.value is not None:
        bundle = result.value
        if not bundle.text:
            print(f"[NO CONTEXT] reason={bundle.reason}")
            return 0
        print(bundle.text)
        print("\n" + "=" * 80)
        print(
            f"blocks={bundle.blocks} tokens~{bundle.used_tokens} "
            f"candidates={bundle.candidate_count} selected={bundle.selected_count}"
        )
        return 0

    err = result.error
    print(f"\n[ERROR] {type(err).__name__}: {err}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
