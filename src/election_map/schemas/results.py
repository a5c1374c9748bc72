"""Pydantic v2 schemas for the four result views handed to the rendering layer."""

from enum import StrEnum

from pydantic import BaseModel, Field


class ViewLevel(StrEnum):
    """Granularity of a result view, from widest to narrowest."""

    NATIONAL = "national"
    STATE = "state"
    STATEWIDE = "statewide"
    COUNTY = "county"


class PartyTally(BaseModel):
    """Votes for one party within a view."""

    party: str = Field(description="Canonical party identifier")
    label: str = Field(description="Display name for the party")
    votes: int = Field(ge=0, description="Votes for the party")
    percentage: float = Field(description="Share of all votes in the view, rounded to one decimal")
    units_won: int | None = Field(
        default=None,
        description="States (national view) or counties (statewide view) carried by the party",
    )
    candidates: list[str] | None = Field(default=None, description="Candidate names behind the tally (county view)")


class ViewSummary(BaseModel):
    """Fields shared by every view."""

    level: ViewLevel
    year: int
    title: str = Field(description="Heading for the view")
    winner: str = Field(description="Winning party, or UNKNOWN")
    winner_label: str
    winner_votes: int = Field(ge=0)
    total_votes: int = Field(ge=0)
    parties: list[PartyTally] = Field(default_factory=list, description="Parties with votes, most votes first")


class NationalSummary(ViewSummary):
    """Nationwide totals summed over every state."""

    level: ViewLevel = ViewLevel.NATIONAL
    state_count: int = Field(ge=0)


class StateSummary(ViewSummary):
    """One state's totals."""

    level: ViewLevel = ViewLevel.STATE
    state: str


class StatewideSummary(ViewSummary):
    """A state's totals with county wins, for the county overview map."""

    level: ViewLevel = ViewLevel.STATEWIDE
    state: str
    county_count: int = Field(ge=0)
    note: str | None = Field(default=None, description="Explanation when boundaries do not line up with the election-data subdivisions")


class CountySummary(ViewSummary):
    """One county's reconciled result."""

    level: ViewLevel = ViewLevel.COUNTY
    state: str
    storage_key: str
    name: str
