# quackfetch/cli.py
"""
Command-line search.

Usage:

  quackfetch "python packaging"
  quackfetch "python packaging" --max 5 --no-cache
  quackfetch "python packaging" --rate-limit 2000 --json
  python -m quackfetch "python packaging" -v

Exit codes: 0 on success, 1 when the search fails, 2 on bad arguments.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from quackfetch import config
from quackfetch.exceptions import QuackfetchError
from quackfetch.search.engine import SearchContext
from quackfetch.search.models import SearchResult


def _positive_int(raw: str) -> int:
    try:
        v = int(raw)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from err
    if v <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {v}")
    return v


def _non_negative_int(raw: str) -> int:
    try:
        v = int(raw)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from err
    if v < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {v}")
    return v


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="quackfetch", description="Search DuckDuckGo and print structured results."
    )
    ap.add_argument("query", help="Search query")
    ap.add_argument(
        "--max",
        type=_positive_int,
        default=config.MAX_RESULTS,
        help=f"Maximum number of results (default: {config.MAX_RESULTS})",
    )
    ap.add_argument("--no-cache", action="store_true", help="Bypass the result cache")
    ap.add_argument(
        "--rate-limit",
        type=_non_negative_int,
        default=int(config.RATE_LIMIT_S * 1000),
        help="Minimum milliseconds between requests to the search host (default: %(default)s)",
    )
    ap.add_argument("--json", action="store_true", help="Print results as a JSON array")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return ap


def _print_human(query: str, results: list[SearchResult]) -> None:
    print(f'Found {len(results)} results for "{query}":')
    print()
    for r in results:
        print(f"{r.rank}. {r.title}")
        print(f"   URL: {r.url}")
        print(f"   Source: {r.source}")
        if r.snippet:
            snippet = r.snippet if len(r.snippet) <= 100 else r.snippet[:100] + "..."
            print(f"   Snippet: {snippet}")
        print()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with SearchContext() as ctx:
        try:
            results = ctx.search(
                args.query,
                max=args.max,
                use_cache=not args.no_cache,
                rate_limit=args.rate_limit / 1000.0,
            )
        except QuackfetchError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    else:
        _print_human(args.query, results)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
