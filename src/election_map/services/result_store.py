"""Result store — owns ingested rows, computed results, processing state and caches.

Aggregation is scheduled lazily: a whole year is processed on the first
national/state request for it, and a single state within a year on the
first county-level request for that state. Each key moves through
UNPROCESSED → PROCESSING → PROCESSED exactly once; repeated or concurrent
requests for the same key wait on (or skip) the work already done.

Every store instance is independent, so tests and multiple data sets never
share results or caches.
"""

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from itertools import chain
from pathlib import Path

from loguru import logger

from election_map.lib.boundary_loader.geojson import BoundaryFeature
from election_map.lib.geography.reconciler import GeographyReconciler, MatchCache
from election_map.lib.geography.reference import ReferenceTables, load_reference_tables
from election_map.lib.importer.parser import read_results_csv
from election_map.lib.tabulator.aggregator import aggregate_rows, finalize_counties, parse_year, roll_up_states
from election_map.lib.tabulator.types import (
    CountyResult,
    GeographyMatch,
    RawRow,
    StateResult,
    TieBreak,
    YearResults,
)

ScheduleKey = tuple[int, str | None]


class ProcessingState(StrEnum):
    """Lifecycle of a year or (year, state) aggregation."""

    UNPROCESSED = "unprocessed"
    PROCESSING = "processing"
    PROCESSED = "processed"


def _state_name(state: str) -> str:
    return state.strip().upper()


class ResultStore:
    """Lazily computed county, state and national results for every year.

    Args:
        tables: Reference tables; the bundled tables are used when omitted.
        tie_break: Rule for tied leaders in county and state winners.
    """

    def __init__(
        self,
        tables: ReferenceTables | None = None,
        tie_break: TieBreak = TieBreak.SCAN_ORDER,
    ) -> None:
        self.tables = tables if tables is not None else load_reference_tables()
        self.tie_break = tie_break

        self._rows: dict[int, dict[str, list[RawRow]]] = {}
        self._rows_loaded = asyncio.Event()
        self._loading = False

        self._counties: dict[int, dict[str, CountyResult]] = {}
        self._states: dict[int, dict[str, StateResult]] = {}
        self._status: dict[ScheduleKey, ProcessingState] = {}
        self._inflight: dict[ScheduleKey, asyncio.Event] = {}

        self.match_cache = MatchCache()
        self._render_cache: dict[tuple, dict[str, str | None]] = {}
        self.reconciler = GeographyReconciler(self._counties_for_year, self.tables, self.match_cache)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest_rows(self, rows: Iterable[RawRow | Mapping]) -> int:
        """Replace the raw table with ``rows``, indexed by year and state.

        Previously computed results, processing state and caches are dropped.

        Args:
            rows: RawRow records or mappings keyed by source column names.

        Returns:
            Number of rows indexed.
        """
        indexed: dict[int, dict[str, list[RawRow]]] = {}
        count = 0
        skipped = 0
        for item in rows:
            row = item if isinstance(item, RawRow) else RawRow.from_record(item)
            year = parse_year(row.year)
            if year is None:
                skipped += 1
                continue
            state = _state_name(str(row.state or ""))
            indexed.setdefault(year, {}).setdefault(state, []).append(row)
            count += 1

        self.reset()
        self._rows = indexed
        self._loading = False
        self._rows_loaded.set()
        logger.info("Indexed {} rows across {} years ({} without a usable year)", count, len(indexed), skipped)
        return count

    async def ingest_csv(self, path: Path, batch_size: int = 50000) -> int:
        """Read a results CSV off the event loop and ingest it.

        Raises:
            DataSourceUnavailableError: If the file cannot be loaded.
        """
        self._loading = True
        try:
            rows = await asyncio.to_thread(read_results_csv, path, batch_size)
        except BaseException:
            self._loading = False
            raise
        return self.ingest_rows(rows)

    async def _wait_for_rows(self) -> None:
        if self._rows_loaded.is_set():
            return
        if not self._loading:
            msg = "No election results have been ingested"
            raise RuntimeError(msg)
        await self._rows_loaded.wait()

    def available_years(self) -> list[int]:
        """Years present in the ingested table, ascending."""
        return sorted(self._rows)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def processing_state(self, year: int, state: str | None = None) -> ProcessingState:
        """Return the lifecycle state of a year or (year, state) aggregation."""
        key = (year, _state_name(state) if state else None)
        return self._status.get(key, ProcessingState.UNPROCESSED)

    def is_state_processed(self, year: int, state: str) -> bool:
        return self.processing_state(year, state) is ProcessingState.PROCESSED

    async def ensure_year_processed(self, year: int) -> None:
        """Complete once national and state results for ``year`` are available."""
        await self._run_once((year, None))

    async def ensure_state_processed(self, year: int, state: str) -> None:
        """Complete once county results for ``state`` in ``year`` are available."""
        await self._run_once((year, _state_name(state)))

    async def _run_once(self, key: ScheduleKey) -> None:
        status = self._status.get(key, ProcessingState.UNPROCESSED)
        if status is ProcessingState.PROCESSED:
            return
        if status is ProcessingState.PROCESSING:
            await self._inflight[key].wait()
            # The first run may have failed; check again and retry if so.
            await self._run_once(key)
            return

        self._status[key] = ProcessingState.PROCESSING
        done = asyncio.Event()
        self._inflight[key] = done
        try:
            await self._wait_for_rows()
            # A year run covering this state may have finished while we waited.
            if self._status.get(key) is not ProcessingState.PROCESSED:
                year, state = key
                self._process(year, state)
        except BaseException:
            self._status[key] = ProcessingState.UNPROCESSED
            raise
        finally:
            done.set()
            del self._inflight[key]

    def _process(self, year: int, state: str | None) -> None:
        by_state = self._rows.get(year, {})
        if state is not None:
            targets = [state]
        else:
            targets = [s for s in by_state if not self.is_state_processed(year, s)]

        if targets:
            self._aggregate(year, targets)

        self._status[(year, state)] = ProcessingState.PROCESSED
        for target in targets:
            self._status[(year, target)] = ProcessingState.PROCESSED

    def _aggregate(self, year: int, states: Sequence[str]) -> None:
        """Aggregate the rows of ``states`` in ``year`` and store the results."""
        by_state = self._rows.get(year, {})
        rows = chain.from_iterable(by_state.get(s, ()) for s in states)
        scope = states[0] if len(states) == 1 else None
        batch = aggregate_rows(rows, year, self.tables, state=scope)

        new_counties = finalize_counties(batch, self.tables, self.tie_break)
        year_counties = self._counties.setdefault(year, {})
        for key, result in new_counties.items():
            existing = year_counties.get(key)
            if existing is not None and existing.state != result.state:
                logger.warning("Storage key {} already holds {} in {}; skipping {}", key, existing.state, year, result.state)
                continue
            year_counties[key] = result

        touched = {result.state for result in new_counties.values()}
        state_counties = {k: r for k, r in year_counties.items() if r.state in touched}
        self._states.setdefault(year, {}).update(roll_up_states(state_counties, self.tie_break))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _counties_for_year(self, year: int) -> Mapping[str, CountyResult]:
        return self._counties.get(year, {})

    def query(self, year: int) -> YearResults:
        """Snapshot of the state and county results computed so far for ``year``."""
        return YearResults(
            year=year,
            states=dict(self._states.get(year, {})),
            counties=dict(self._counties.get(year, {})),
        )

    def state_result(self, year: int, state: str) -> StateResult | None:
        return self._states.get(year, {}).get(_state_name(state))

    def county_result(self, year: int, storage_key: str) -> CountyResult | None:
        return self._counties.get(year, {}).get(storage_key)

    def counties_of(self, year: int, state: str) -> dict[str, CountyResult]:
        """County results of one state, keyed by storage key."""
        name = _state_name(state)
        return {k: r for k, r in self._counties.get(year, {}).items() if r.state == name}

    def resolve_geography_key(self, year: int, state: str, topology_id: str | int) -> GeographyMatch | None:
        """Resolve a boundary county id to its stored result, or None for no data.

        Lookups against a state that has not been processed yet return None
        without touching the match cache.
        """
        name = _state_name(state)
        if not self.is_state_processed(year, name):
            logger.debug("Lookup of {} in {} before {} was processed", topology_id, year, name)
            return None
        return self.reconciler.resolve(year, name, topology_id)

    # ------------------------------------------------------------------
    # Derived render inputs
    # ------------------------------------------------------------------

    def counties_in_state(self, features: Iterable[BoundaryFeature], state: str) -> list[BoundaryFeature]:
        """County features whose FIPS prefix belongs to ``state``."""
        name = _state_name(state)
        return [f for f in features if self.tables.state_name(f.state_fips) == name]

    def state_fill(self, year: int, features: Iterable[BoundaryFeature]) -> dict[str, str | None]:
        """Winner per state feature identifier, None where there is no result."""
        cache_key = ("states", year)
        if cache_key in self._render_cache:
            return self._render_cache[cache_key]

        fill: dict[str, str | None] = {}
        for feature in features:
            state = self.tables.state_name(feature.state_fips)
            result = self.state_result(year, state) if state else None
            fill[feature.identifier] = result.winner if result else None

        if self.processing_state(year) is ProcessingState.PROCESSED:
            self._render_cache[cache_key] = fill
        return fill

    def county_fill(self, year: int, state: str, features: Iterable[BoundaryFeature]) -> dict[str, str | None]:
        """Winner per county feature identifier of ``state``, None where there is no data."""
        name = _state_name(state)
        cache_key = ("counties", year, name)
        if cache_key in self._render_cache:
            return self._render_cache[cache_key]

        fill: dict[str, str | None] = {}
        for feature in self.counties_in_state(features, name):
            match = self.resolve_geography_key(year, name, feature.identifier)
            fill[feature.identifier] = match.result.winner if match else None

        if self.is_state_processed(year, name):
            self._render_cache[cache_key] = fill
        return fill

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def clear_caches(self) -> None:
        """Drop every memoized geography match and derived render input."""
        logger.info("Clearing {} geography matches and {} render inputs", len(self.match_cache), len(self._render_cache))
        self.match_cache.clear()
        self._render_cache.clear()

    def reset(self) -> None:
        """Drop caches, computed results and processing state; keep ingested rows."""
        self.clear_caches()
        self._counties.clear()
        self._states.clear()
        self._status.clear()
