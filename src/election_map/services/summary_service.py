"""Result view builders — national, state, statewide-county and county summaries.

Each builder reads an already-processed ResultStore and returns a
Pydantic summary, or None when the requested unit has no data.
``summarize`` schedules the processing a view needs before building it.
"""

from collections import Counter
from collections.abc import Mapping

from election_map.lib.tabulator.types import DEMOCRAT, REPUBLICAN, UNKNOWN, CandidateTally
from election_map.lib.tabulator.winner import determine_winner
from election_map.schemas.results import (
    CountySummary,
    NationalSummary,
    PartyTally,
    StateSummary,
    StatewideSummary,
    ViewLevel,
    ViewSummary,
)
from election_map.services.result_store import ResultStore

_PARTY_LABELS = {
    REPUBLICAN: "Republican",
    DEMOCRAT: "Democrat",
    UNKNOWN: "Unknown",
}

_PARENT_LEVEL = {
    ViewLevel.COUNTY: ViewLevel.STATEWIDE,
    ViewLevel.STATEWIDE: ViewLevel.STATE,
    ViewLevel.STATE: ViewLevel.NATIONAL,
    ViewLevel.NATIONAL: ViewLevel.NATIONAL,
}


def party_label(party: str) -> str:
    """Display name for a canonical party identifier."""
    return _PARTY_LABELS.get(party, party.title())


def drill_up(level: ViewLevel) -> ViewLevel:
    """Return the next wider view (national stays national)."""
    return _PARENT_LEVEL[level]


def _percentage(votes: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(votes / total * 100, 1)


def _party_tallies(
    votes: Mapping[str, int],
    units_won: Mapping[str, int] | None = None,
    candidates: Mapping[str, CandidateTally] | None = None,
) -> list[PartyTally]:
    total = sum(votes.values())
    ranked = sorted(((p, v) for p, v in votes.items() if v > 0), key=lambda item: item[1], reverse=True)
    return [
        PartyTally(
            party=party,
            label=party_label(party),
            votes=count,
            percentage=_percentage(count, total),
            units_won=units_won.get(party, 0) if units_won is not None else None,
            candidates=list(candidates[party].names) if candidates and party in candidates else None,
        )
        for party, count in ranked
    ]


def _common(year: int, title: str, winner: str, votes: Mapping[str, int]) -> dict:
    return {
        "year": year,
        "title": title,
        "winner": winner,
        "winner_label": party_label(winner),
        "winner_votes": votes.get(winner, 0),
        "total_votes": sum(votes.values()),
    }


def national_summary(store: ResultStore, year: int) -> NationalSummary | None:
    """Nationwide totals and states carried per party."""
    states = store.query(year).states
    if not states:
        return None

    votes: dict[str, int] = {}
    states_won: Counter = Counter()
    for result in states.values():
        for party, count in result.votes.items():
            votes[party] = votes.get(party, 0) + count
        states_won[result.winner] += 1

    winner = determine_winner(votes, store.tie_break)
    return NationalSummary(
        **_common(year, f"{year} National Results", winner, votes),
        parties=_party_tallies(votes, units_won=states_won),
        state_count=len(states),
    )


def state_summary(store: ResultStore, year: int, state: str) -> StateSummary | None:
    """One state's totals per party."""
    result = store.state_result(year, state)
    if result is None:
        return None
    return StateSummary(
        **_common(year, f"{year} {result.state} Results", result.winner, result.votes),
        parties=_party_tallies(result.votes),
        state=result.state,
    )


def statewide_summary(store: ResultStore, year: int, state: str) -> StatewideSummary | None:
    """A state's totals with the number of counties each party carried."""
    result = store.state_result(year, state)
    if result is None:
        return None

    counties = store.counties_of(year, result.state)
    counties_won = Counter(county.winner for county in counties.values())
    note = store.tables.unmatched_subdivision_notes.get(result.state)

    return StatewideSummary(
        **_common(year, f"{year} {result.state} Counties", result.winner, result.votes),
        parties=_party_tallies(result.votes, units_won=counties_won),
        state=result.state,
        county_count=len(counties),
        note=note,
    )


def county_summary(store: ResultStore, year: int, storage_key: str) -> CountySummary | None:
    """One county's result with the candidates behind each party tally."""
    result = store.county_result(year, storage_key)
    if result is None:
        return None

    by_party = {tally.party: tally for tally in result.candidates}
    return CountySummary(
        **_common(year, f"{year} {result.name} Results", result.winner, result.votes),
        parties=_party_tallies(result.votes, candidates=by_party),
        state=result.state,
        storage_key=result.storage_key,
        name=result.name,
    )


async def summarize(
    store: ResultStore,
    level: ViewLevel,
    year: int,
    state: str | None = None,
    county_key: str | None = None,
) -> ViewSummary | None:
    """Process whatever ``level`` needs, then build its summary.

    Args:
        store: Result store with ingested rows.
        level: View granularity.
        year: Election year.
        state: State name; required below the national level.
        county_key: County storage key; required for the county level.

    Returns:
        The summary, or None when the unit has no data.

    Raises:
        ValueError: If a required argument for ``level`` is missing.
    """
    if level is not ViewLevel.NATIONAL and not state:
        msg = f"A state is required for the {level} view"
        raise ValueError(msg)
    if level is ViewLevel.COUNTY and not county_key:
        msg = "A county storage key is required for the county view"
        raise ValueError(msg)

    if level in (ViewLevel.NATIONAL, ViewLevel.STATE):
        await store.ensure_year_processed(year)
        if level is ViewLevel.NATIONAL:
            return national_summary(store, year)
        return state_summary(store, year, state)

    await store.ensure_state_processed(year, state)
    if level is ViewLevel.STATEWIDE:
        return statewide_summary(store, year, state)

    summary = county_summary(store, year, county_key)
    if summary is not None and summary.state != state.strip().upper():
        return None
    return summary
