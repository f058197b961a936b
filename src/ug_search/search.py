"""Search orchestration -- drives the advance loop and collects matches.

Provides:

- **SearchOrchestrator**: runs one window of advances against a spawn oracle.
- **SearchRequest**: the full user configuration for one search.
- **search**: parse the seed, skip to the window start, run, and report
  absolute advance numbers.
- **BatchSearchRunner**: runs many independent searches, optionally in
  parallel.
"""

from __future__ import annotations

import logging
import multiprocessing
import threading
from typing import Iterable

from pydantic import BaseModel, Field

from ug_search.core.models import MatchRecord, SearchContext
from ug_search.core.statues import Statue, StatueConfig
from ug_search.errors import OracleContractError, ResultCapacityError
from ug_search.filters import FilterSpec, Predicate, compile_filter
from ug_search.oracle.base import SpawnOracle, SpawnResult
from ug_search.rng.xorshift import XorShift128, skip_to_offset
from ug_search.seed import parse_seed_words

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 1_000_000


class CancelToken:
    """Cooperative cancellation flag, polled once per advance."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# =====================================================================
# SearchOrchestrator
# =====================================================================

class SearchOrchestrator:
    """Runs the per-advance oracle/filter loop for one search."""

    def __init__(self, oracle: SpawnOracle, max_results: int = DEFAULT_MAX_RESULTS) -> None:
        self.oracle = oracle
        self.max_results = max_results

    def run(
        self,
        window: int,
        rng: XorShift128,
        context: SearchContext,
        filter_spec: FilterSpec | Predicate,
        statues: StatueConfig | Iterable[Statue] = (),
        cancel: CancelToken | None = None,
    ) -> list[MatchRecord]:
        """Search *window* advances starting from the current state of *rng*.

        *rng* is owned by the search and ends up advanced by the number of
        advances processed.  Returned advances are relative to the window
        start, ascending, with a regular spawn before the rare spawn of the
        same advance.

        Raises
        ------
        ResultCapacityError
            More than ``max_results`` matches; ``partial`` holds the matches
            collected so far.
        OracleContractError
            The oracle returned something other than a :class:`SpawnResult`.
        """
        if window < 0:
            raise ValueError(f"window must be >= 0, got {window}")

        predicate = filter_spec if isinstance(filter_spec, Predicate) else compile_filter(filter_spec)
        snapshot = statues.snapshot() if isinstance(statues, StatueConfig) else tuple(statues)

        matches: list[MatchRecord] = []
        processed = 0
        for advance in range(window):
            if cancel is not None and cancel.cancelled:
                logger.warning("Search cancelled after %d of %d advances", advance, window)
                break

            result = self.oracle.generate(rng.copy(), context, snapshot)
            if not isinstance(result, SpawnResult):
                raise OracleContractError(
                    f"oracle returned {type(result).__name__} at advance {advance}"
                )
            for event in result:
                if predicate.matches(event):
                    if len(matches) >= self.max_results:
                        raise ResultCapacityError(self.max_results, matches)
                    matches.append(MatchRecord(advance, event))

            rng.next()
            processed += 1

        logger.debug("Processed %d advances, %d matches", processed, len(matches))
        return matches


# =====================================================================
# SearchRequest / search
# =====================================================================

class SearchRequest(BaseModel):
    """Complete configuration for one search."""

    seed: tuple[str, str, str, str]
    """The four state words ``s0``..``s3`` as hex text."""

    min_advances: int = Field(default=0, ge=0)
    """First advance of the window; reported advances start here."""

    max_advances: int = Field(default=10_000, ge=0)
    """Number of advances searched."""

    delay: int = Field(default=0, ge=0)
    """Extra advances consumed before the window without shifting reported numbers."""

    context: SearchContext = SearchContext()
    filter: FilterSpec = FilterSpec()
    statues: list[Statue] = []


def search(
    request: SearchRequest,
    oracle: SpawnOracle,
    cancel: CancelToken | None = None,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[MatchRecord]:
    """Run *request* end to end and return matches with absolute advances.

    The seed is parsed and the statue list validated before any generator
    state exists, so a bad request fails without side effects.
    """
    words = parse_seed_words(request.seed)
    statues = StatueConfig(request.statues)

    rng = XorShift128.from_state(words)
    skip_to_offset(rng, request.min_advances, request.min_advances + request.delay)

    orchestrator = SearchOrchestrator(oracle, max_results=max_results)
    try:
        matches = orchestrator.run(
            request.max_advances, rng, request.context, request.filter, statues, cancel,
        )
    except ResultCapacityError as exc:
        exc.partial = [m.shifted(request.min_advances) for m in exc.partial]
        raise
    return [m.shifted(request.min_advances) for m in matches]


# =====================================================================
# BatchSearchRunner
# =====================================================================

def _worker_search(item: tuple[SpawnOracle, SearchRequest]) -> list[MatchRecord]:
    """Worker entry point for multiprocessing."""
    oracle, request = item
    return search(request, oracle)


class BatchSearchRunner:
    """Runs independent searches, optionally in parallel.

    Searches share no mutable state: each one owns its generator, its
    statue snapshot and its result list.
    """

    def __init__(self, oracle: SpawnOracle) -> None:
        self.oracle = oracle

    def run_batch(
        self,
        requests: list[SearchRequest],
        parallel: bool = False,
    ) -> list[list[MatchRecord]]:
        """Run every request; results are returned in request order."""
        logger.info("Running %d searches (parallel=%s)", len(requests), parallel)
        if parallel and len(requests) > 1:
            return self._run_parallel(requests)
        return [search(request, self.oracle) for request in requests]

    def _run_parallel(self, requests: list[SearchRequest]) -> list[list[MatchRecord]]:
        work_items = [(self.oracle, request) for request in requests]
        n_workers = min(len(requests), multiprocessing.cpu_count() or 1)

        with multiprocessing.Pool(processes=n_workers) as pool:
            results = pool.map(_worker_search, work_items)

        return results
