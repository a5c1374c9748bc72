"""Data types for the tabulator library.

Defines the raw tabulation row, the per-county accumulator mutated during
aggregation, and the immutable county/state results produced at
finalization.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

REPUBLICAN = "REPUBLICAN"
DEMOCRAT = "DEMOCRAT"
UNKNOWN = "UNKNOWN"

# Tabular source column → RawRow field
RESULT_COLUMN_MAP: dict[str, str] = {
    "year": "year",
    "state": "state",
    "county_fips": "county_fips",
    "county_name": "county_name",
    "candidate": "candidate",
    "party": "party",
    "candidatevotes": "votes",
    "mode": "mode",
}


class TieBreak(StrEnum):
    """Rule used when two or more parties share the maximum vote count."""

    SCAN_ORDER = "scan_order"
    ALPHABETICAL = "alphabetical"


@dataclass(frozen=True)
class RawRow:
    """A single unvalidated row of the county-level results table.

    Values are kept as read from the source; the aggregator decides
    whether a row is usable.
    """

    year: int | str | None
    state: str | None
    county_fips: str | None
    county_name: str | None
    candidate: str | None
    party: str | None
    mode: str | None
    votes: int | str | None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> RawRow:
        """Build a RawRow from a mapping keyed by source column names.

        Accepts either the tabular column names (``candidatevotes``) or the
        RawRow field names (``votes``).
        """
        values: dict[str, Any] = {name: None for name in RESULT_COLUMN_MAP.values()}
        for key, value in record.items():
            column = str(key).strip().lower()
            if column in RESULT_COLUMN_MAP:
                values[RESULT_COLUMN_MAP[column]] = value
            elif column in values:
                values[column] = value
        return cls(**values)


@dataclass
class CountyAccumulator:
    """Mode-partitioned vote totals for one (year, state, county)."""

    county_fips: str
    state: str
    name: str | None = None
    modes: dict[str, dict[str, int]] = field(default_factory=dict)
    candidates: dict[str, list[str]] = field(default_factory=dict)

    def add(self, mode: str, party: str, votes: int, candidate: str) -> None:
        tally = self.modes.setdefault(mode, {})
        tally[party] = tally.get(party, 0) + votes
        names = self.candidates.setdefault(party, [])
        if candidate not in names:
            names.append(candidate)


@dataclass(frozen=True)
class CandidateTally:
    """Final county votes for one party with the candidate names behind them."""

    party: str
    names: tuple[str, ...]
    votes: int


@dataclass(frozen=True)
class CountyResult:
    """Reconciled result for one county in one year."""

    winner: str
    votes: dict[str, int]
    state: str
    name: str
    candidates: tuple[CandidateTally, ...]
    storage_key: str
    county_fips: str

    @property
    def total_votes(self) -> int:
        return sum(self.votes.values())


@dataclass(frozen=True)
class StateResult:
    """Result for one state, rolled up from its county results."""

    state: str
    winner: str
    votes: dict[str, int]
    county_count: int

    @property
    def total_votes(self) -> int:
        return sum(self.votes.values())


@dataclass(frozen=True)
class YearResults:
    """Snapshot of everything computed so far for a single year."""

    year: int
    states: dict[str, StateResult]
    counties: dict[str, CountyResult]


@dataclass(frozen=True)
class GeographyMatch:
    """A boundary identifier resolved to a stored county result."""

    matched_key: str
    result: CountyResult
