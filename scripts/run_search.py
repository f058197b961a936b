"""Run an underground spawn search from JSON configuration.

Usage:
    uv run python scripts/run_search.py request.json tables.json [--limit 100]

``request.json`` holds a :class:`SearchRequest`, ``tables.json`` a
:class:`SpawnTableSet`.  Matches are printed one per line as ids.
"""

from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path

from ug_search.core.models import MatchRecord
from ug_search.oracle.table import TableOracle, load_table_set
from ug_search.search import SearchRequest, search

_GENDER_SYMBOLS = ("M", "F", "-")


def format_match(match: MatchRecord) -> str:
    e = match.event
    ivs = "/".join(str(iv) for iv in e.ivs)
    return (
        f"{match.advance:>8}  {e.pid:08X}  species={e.species:<4} "
        f"{'shiny' if e.shiny else '     '}  {ivs:<17}  ability={e.ability} "
        f"gender={_GENDER_SYMBOLS[e.gender]} nature={e.nature:<2} item={e.item:<4} "
        f"egg_move={e.egg_move or 0:<4} ec={e.ec:08X}{'  rare' if e.rare else ''}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Search underground spawns")
    parser.add_argument("request", type=str, help="SearchRequest JSON file")
    parser.add_argument("tables", type=str, help="SpawnTableSet JSON file")
    parser.add_argument("--limit", type=int, default=0, help="Print at most N matches")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    request = SearchRequest.model_validate(json.loads(Path(args.request).read_text()))
    oracle = TableOracle(load_table_set(Path(args.tables)))

    print(f"Searching {request.max_advances:,} advances from {request.min_advances:,}...")
    t0 = time.perf_counter()
    matches = search(request, oracle)
    elapsed = time.perf_counter() - t0
    print(f"{len(matches):,} matches in {elapsed:.2f}s")

    shown = matches[: args.limit] if args.limit else matches
    for match in shown:
        print(format_match(match))


if __name__ == "__main__":
    main()
