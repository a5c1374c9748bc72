"""Tabulator library — turn raw county results rows into reconciled tallies.

Public API:
    - RawRow: Unvalidated input record
    - aggregate_rows: Accumulate rows per county and reporting mode
    - finalize_counties: Resolve modes and winners into CountyResults
    - roll_up_states: Sum county results into StateResults
    - resolve_modes: Pick the authoritative tally among reporting modes
    - normalize_party: Canonical party identifier
    - determine_winner: Plurality winner with configurable tie-break
"""

from election_map.lib.tabulator.aggregator import (
    AggregationBatch,
    RowRejection,
    aggregate_rows,
    check_row,
    finalize_counties,
    roll_up_states,
)
from election_map.lib.tabulator.modes import AGGREGATE_MODES, COMPONENT_MODES, resolve_modes
from election_map.lib.tabulator.party import normalize_party
from election_map.lib.tabulator.types import (
    DEMOCRAT,
    REPUBLICAN,
    UNKNOWN,
    CandidateTally,
    CountyResult,
    GeographyMatch,
    RawRow,
    StateResult,
    TieBreak,
    YearResults,
)
from election_map.lib.tabulator.winner import determine_winner

__all__ = [
    "AGGREGATE_MODES",
    "COMPONENT_MODES",
    "DEMOCRAT",
    "REPUBLICAN",
    "UNKNOWN",
    "AggregationBatch",
    "CandidateTally",
    "CountyResult",
    "GeographyMatch",
    "RawRow",
    "RowRejection",
    "StateResult",
    "TieBreak",
    "YearResults",
    "aggregate_rows",
    "check_row",
    "determine_winner",
    "finalize_counties",
    "normalize_party",
    "resolve_modes",
    "roll_up_states",
]
