"""Record aggregation — raw tabulation rows to reconciled county and state results.

Rows are validated, pre-normalized (town codes, party labels, modes) and
accumulated per (state, county, mode, party). Finalization resolves each
county's reporting modes, picks winners, remaps storage keys and rolls the
county tallies up into state results.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from loguru import logger

from election_map.lib.geography.reference import ReferenceTables
from election_map.lib.tabulator.modes import TOTAL, resolve_modes
from election_map.lib.tabulator.party import normalize_party
from election_map.lib.tabulator.types import (
    CandidateTally,
    CountyAccumulator,
    CountyResult,
    RawRow,
    StateResult,
    TieBreak,
)
from election_map.lib.tabulator.winner import determine_winner

_MISSING_TOKENS = frozenset({"", "NA", "NAN", "NULL", "NONE"})

_VOTE_MARKERS = ("OVERVOTE", "UNDERVOTE", "OVER VOTES", "UNDER VOTES")

_UNNAMED_COUNTY = "Unknown County"


class RowRejection(StrEnum):
    """Why a raw row was left out of the aggregation."""

    HEADER = "header"
    INVALID_YEAR = "invalid_year"
    INVALID_COUNTY = "invalid_county"
    INVALID_VOTES = "invalid_votes"
    NEGATIVE_VOTES = "negative_votes"
    MISSING_PARTY = "missing_party"
    NON_CANDIDATE = "non_candidate"
    ZERO_VOTES = "zero_votes"


@dataclass
class AggregationBatch:
    """Accumulators produced from one scoped pass over the raw rows."""

    year: int
    state: str | None
    counties: dict[tuple[str, str], CountyAccumulator] = field(default_factory=dict)
    accepted: int = 0
    rejected: Counter = field(default_factory=Counter)

    @property
    def states(self) -> set[str]:
        return {state for state, _ in self.counties}


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_year(value: object) -> int | None:
    """Coerce a year cell to int, or None when it is not a year."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = _text(value)
    if text.isdigit():
        return int(text)
    return None


def parse_votes(value: object) -> int | None:
    """Coerce a vote-count cell to int, or None when it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = _text(value)
    if text.upper() in _MISSING_TOKENS:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None


def is_non_candidate(candidate: str) -> bool:
    """True for header artifacts, total rows and over/under-vote markers."""
    label = candidate.strip().upper()
    if not label or label in ("CANDIDATE", "TOTAL VOTES CAST"):
        return True
    return any(marker in label for marker in _VOTE_MARKERS)


def check_row(row: RawRow) -> RowRejection | None:
    """Return the reason a row is unusable, or None when it can be aggregated."""
    if _text(row.year).lower() == "year":
        return RowRejection.HEADER
    if parse_year(row.year) is None:
        return RowRejection.INVALID_YEAR
    county = _text(row.county_fips)
    if not county.isdigit():
        return RowRejection.INVALID_COUNTY
    votes = parse_votes(row.votes)
    if votes is None:
        return RowRejection.INVALID_VOTES
    if votes < 0:
        return RowRejection.NEGATIVE_VOTES
    if _text(row.party).upper() in _MISSING_TOKENS:
        return RowRejection.MISSING_PARTY
    if is_non_candidate(_text(row.candidate)):
        return RowRejection.NON_CANDIDATE
    # Zero-vote placeholder rows must not take mode precedence over real counts.
    if votes == 0:
        return RowRejection.ZERO_VOTES
    return None


def aggregate_rows(
    rows: Iterable[RawRow],
    year: int,
    tables: ReferenceTables,
    state: str | None = None,
) -> AggregationBatch:
    """Accumulate raw rows for one year (optionally one state) by county and mode.

    Rows for other years or states are skipped without being counted as
    rejected; malformed rows are dropped and counted per reason.

    Args:
        rows: Raw rows, in source order.
        year: Target election year.
        tables: Reference tables for town-code truncation.
        state: Optional target state name.

    Returns:
        An AggregationBatch with one accumulator per (state, county id).
    """
    batch = AggregationBatch(year=year, state=state)

    for row in rows:
        rejection = check_row(row)
        if rejection is not None:
            batch.rejected[rejection] += 1
            continue
        if parse_year(row.year) != year:
            continue
        row_state = _text(row.state).upper()
        if state is not None and row_state != state:
            continue

        county = tables.normalize_county_id(row_state, _text(row.county_fips))
        party = normalize_party(_text(row.party))
        mode = _text(row.mode).upper() or TOTAL
        votes = parse_votes(row.votes) or 0

        accumulator = batch.counties.get((row_state, county))
        if accumulator is None:
            accumulator = CountyAccumulator(county_fips=county, state=row_state, name=_text(row.county_name) or None)
            batch.counties[(row_state, county)] = accumulator
        accumulator.add(mode, party, votes, _text(row.candidate))
        batch.accepted += 1

    if batch.rejected:
        logger.debug("Rejected rows for {} by reason: {}", year, dict(batch.rejected))
    logger.info(
        "Aggregated {} rows into {} counties for {}{} ({} malformed rows skipped)",
        batch.accepted,
        len(batch.counties),
        year,
        f" / {state}" if state else "",
        sum(batch.rejected.values()),
    )
    return batch


def finalize_county(
    accumulator: CountyAccumulator,
    tables: ReferenceTables,
    tie_break: TieBreak = TieBreak.SCAN_ORDER,
) -> CountyResult:
    """Resolve one county's modes into its final, immutable result."""
    votes = resolve_modes(accumulator.modes)
    candidates = tuple(
        CandidateTally(party=party, names=tuple(accumulator.candidates.get(party, ())), votes=count)
        for party, count in votes.items()
    )
    storage_key = tables.storage_key(accumulator.state, accumulator.county_fips)
    if storage_key != accumulator.county_fips:
        logger.debug("{}: mapped district {} to borough {}", accumulator.state, accumulator.county_fips, storage_key)

    return CountyResult(
        winner=determine_winner(votes, tie_break),
        votes=votes,
        state=accumulator.state,
        name=accumulator.name or _UNNAMED_COUNTY,
        candidates=candidates,
        storage_key=storage_key,
        county_fips=accumulator.county_fips,
    )


def finalize_counties(
    batch: AggregationBatch,
    tables: ReferenceTables,
    tie_break: TieBreak = TieBreak.SCAN_ORDER,
) -> dict[str, CountyResult]:
    """Finalize every accumulator in a batch, keyed by storage key.

    Storage keys are unique within a year; a county whose key is already
    taken is logged and left out.
    """
    results: dict[str, CountyResult] = {}
    for accumulator in batch.counties.values():
        result = finalize_county(accumulator, tables, tie_break)
        existing = results.get(result.storage_key)
        if existing is not None:
            logger.warning(
                "Storage key {} for {} {} collides with {} {} in {}; keeping the first",
                result.storage_key,
                result.state,
                result.county_fips,
                existing.state,
                existing.county_fips,
                batch.year,
            )
            continue
        results[result.storage_key] = result
    return results


def roll_up_states(
    counties: Mapping[str, CountyResult],
    tie_break: TieBreak = TieBreak.SCAN_ORDER,
) -> dict[str, StateResult]:
    """Sum county results into one StateResult per state."""
    totals: dict[str, dict[str, int]] = {}
    county_counts: Counter = Counter()
    for result in counties.values():
        state_votes = totals.setdefault(result.state, {})
        for party, count in result.votes.items():
            state_votes[party] = state_votes.get(party, 0) + count
        county_counts[result.state] += 1

    return {
        state: StateResult(
            state=state,
            winner=determine_winner(votes, tie_break),
            votes=votes,
            county_count=county_counts[state],
        )
        for state, votes in totals.items()
    }
