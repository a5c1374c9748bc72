"""Shared test fixtures for reference tables, sample result rows, and result stores."""

from collections.abc import Callable
from pathlib import Path

import pytest

from election_map.lib.geography.reference import ReferenceTables, load_reference_tables
from election_map.lib.tabulator.types import RawRow
from election_map.services.result_store import ResultStore

CSV_HEADER = "year,state,state_po,county_name,county_fips,office,candidate,party,candidatevotes,totalvotes,version,mode"


def make_row(
    year: int | str,
    state: str,
    county_fips: str,
    party: str,
    votes: int | str,
    *,
    candidate: str | None = None,
    mode: str = "TOTAL",
    county_name: str | None = "Test County",
) -> RawRow:
    """Build a RawRow with sensible defaults for the candidate name."""
    if candidate is None:
        candidate = {"REPUBLICAN": "DONALD J TRUMP", "DEMOCRAT": "KAMALA D HARRIS"}.get(party.upper(), f"{party} NOMINEE")
    return RawRow(
        year=year,
        state=state,
        county_fips=county_fips,
        county_name=county_name,
        candidate=candidate,
        party=party,
        mode=mode,
        votes=votes,
    )


@pytest.fixture
def result_row() -> Callable[..., RawRow]:
    """Factory for RawRow records; see ``make_row``."""
    return make_row


@pytest.fixture
def reference_tables() -> ReferenceTables:
    """The reference tables bundled with the package."""
    return load_reference_tables()


@pytest.fixture
def sample_rows() -> list[RawRow]:
    """A small multi-state, multi-year results table.

    2024:
      GEORGIA 13121 (TOTAL rows): DEMOCRAT 400, REPUBLICAN 100
      GEORGIA 13209 (component modes only): REPUBLICAN 300, DEMOCRAT 50
      ALASKA district 2001: REPUBLICAN 120, DEMOCRAT 80
      RHODE ISLAND towns 4400500000 + 4400500100: DEMOCRAT 50, REPUBLICAN 25
    2020:
      GEORGIA 13121: DEMOCRAT 10, REPUBLICAN 5
    Plus a header artifact, an over-vote marker and an unparseable vote count.
    """
    return [
        make_row("year", "state", "county_fips", "party", "candidatevotes", candidate="candidate"),
        make_row(2024, "GEORGIA", "13121", "DEMOCRAT", 400, county_name="FULTON"),
        make_row(2024, "GEORGIA", "13121", "REPUBLICAN", 100, county_name="FULTON"),
        make_row(2024, "GEORGIA", "13121", "OTHER", 0, candidate="OVERVOTES", county_name="FULTON"),
        make_row(2024, "GEORGIA", "13209", "REPUBLICAN", 200, mode="ELECTION DAY", county_name="MONTGOMERY"),
        make_row(2024, "GEORGIA", "13209", "REPUBLICAN", 100, mode="ABSENTEE", county_name="MONTGOMERY"),
        make_row(2024, "GEORGIA", "13209", "DEMOCRAT", 50, mode="ELECTION DAY", county_name="MONTGOMERY"),
        make_row(2024, "ALASKA", "2001", "REPUBLICAN", 120, county_name="DISTRICT 1"),
        make_row(2024, "ALASKA", "2001", "DEMOCRAT", 80, county_name="DISTRICT 1"),
        make_row(2024, "RHODE ISLAND", "4400500000", "DEMOCRAT", 30, county_name="BARRINGTON"),
        make_row(2024, "RHODE ISLAND", "4400500000", "REPUBLICAN", 10, county_name="BARRINGTON"),
        make_row(2024, "RHODE ISLAND", "4400500100", "DEMOCRAT", 20, county_name="BRISTOL"),
        make_row(2024, "RHODE ISLAND", "4400500100", "REPUBLICAN", 15, county_name="BRISTOL"),
        make_row(2024, "RHODE ISLAND", "4400500100", "LIBERTARIAN", "NA", county_name="BRISTOL"),
        make_row(2020, "GEORGIA", "13121", "DEMOCRAT", 10, candidate="JOSEPH R BIDEN JR", county_name="FULTON"),
        make_row(2020, "GEORGIA", "13121", "REPUBLICAN", 5, county_name="FULTON"),
    ]


@pytest.fixture
def store(reference_tables: ReferenceTables, sample_rows: list[RawRow]) -> ResultStore:
    """A ResultStore with the sample rows ingested and nothing processed yet."""
    result_store = ResultStore(tables=reference_tables)
    result_store.ingest_rows(sample_rows)
    return result_store


@pytest.fixture
def results_csv(tmp_path: Path) -> Path:
    """A results CSV in the county presidential export layout."""
    lines = [
        CSV_HEADER,
        "2024,GEORGIA,GA,FULTON,13121,US PRESIDENT,KAMALA D HARRIS,DEMOCRAT,400,500,20250821,TOTAL",
        "2024,GEORGIA,GA,FULTON,13121,US PRESIDENT,DONALD J TRUMP,REPUBLICAN,100,500,20250821,TOTAL",
        "2024,GEORGIA,GA,MONTGOMERY,13209,US PRESIDENT,DONALD J TRUMP,REPUBLICAN,300,350,20250821,TOTAL",
        "2024,GEORGIA,GA,MONTGOMERY,13209,US PRESIDENT,KAMALA D HARRIS,DEMOCRAT,50,350,20250821,TOTAL",
        "2024,ALASKA,AK,DISTRICT 1,2001,US PRESIDENT,DONALD J TRUMP,REPUBLICAN,120,200,20250821,TOTAL",
        "2024,ALASKA,AK,DISTRICT 1,2001,US PRESIDENT,KAMALA D HARRIS,DEMOCRAT,80,200,20250821,TOTAL",
        "2020,GEORGIA,GA,FULTON,13121,US PRESIDENT,JOSEPH R BIDEN JR,DEMOCRAT,10,15,20250821,TOTAL",
        "2020,GEORGIA,GA,FULTON,13121,US PRESIDENT,DONALD J TRUMP,REPUBLICAN,5,15,20250821,TOTAL",
    ]
    path = tmp_path / "countypres.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
