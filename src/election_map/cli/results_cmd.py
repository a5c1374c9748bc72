"""CLI commands for querying reconciled results.

Loads the configured results table, then prints summaries or boundary-id
lookups as JSON.
"""

import asyncio
import json
from typing import Annotated, NoReturn

import typer
from loguru import logger

from election_map.schemas.results import ViewLevel

results_app = typer.Typer()


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@results_app.command("years")
def years() -> None:
    """List the election years present in the results table."""
    asyncio.run(_years_impl())


async def _years_impl() -> None:
    from election_map.core.config import get_settings
    from election_map.lib.importer.parser import DataSourceUnavailableError
    from election_map.services.map_service import open_map_session

    settings = get_settings()
    try:
        session = await open_map_session(settings, load_boundaries=False)
    except DataSourceUnavailableError as exc:
        _fail(str(exc))

    for year in session.store.available_years():
        typer.echo(str(year))


@results_app.command("summary")
def summary(
    year: Annotated[int | None, typer.Option("--year", help="Election year (defaults to configured year)")] = None,
    level: Annotated[ViewLevel, typer.Option("--level", help="national, state, statewide or county")] = ViewLevel.NATIONAL,
    state: Annotated[str | None, typer.Option("--state", help="State name, e.g. GEORGIA")] = None,
    county: Annotated[str | None, typer.Option("--county", help="County storage key, e.g. 13121")] = None,
) -> None:
    """Print a result summary for one view as JSON."""
    asyncio.run(_summary_impl(year, level, state, county))


async def _summary_impl(year: int | None, level: ViewLevel, state: str | None, county: str | None) -> None:
    from election_map.core.config import get_settings
    from election_map.lib.importer.parser import DataSourceUnavailableError
    from election_map.services.map_service import open_map_session
    from election_map.services.summary_service import summarize

    settings = get_settings()
    try:
        session = await open_map_session(settings, load_boundaries=False)
    except DataSourceUnavailableError as exc:
        _fail(str(exc))

    target_year = year or settings.default_year
    try:
        result = await summarize(session.store, level, target_year, state=state, county_key=county)
    except ValueError as exc:
        _fail(str(exc))

    if result is None:
        typer.echo(f"No data for {level} view in {target_year}")
        return
    typer.echo(result.model_dump_json(indent=2))


@results_app.command("lookup")
def lookup(
    topology_id: Annotated[str, typer.Option("--topology-id", help="County boundary id, e.g. 13211")],
    year: Annotated[int | None, typer.Option("--year", help="Election year (defaults to configured year)")] = None,
    state: Annotated[
        str | None,
        typer.Option("--state", help="State name; derived from the id's FIPS prefix when omitted"),
    ] = None,
) -> None:
    """Resolve a county boundary id to its stored result."""
    asyncio.run(_lookup_impl(topology_id, year, state))


async def _lookup_impl(topology_id: str, year: int | None, state: str | None) -> None:
    from election_map.core.config import get_settings
    from election_map.lib.geography.fips import state_fips_of
    from election_map.lib.importer.parser import DataSourceUnavailableError
    from election_map.services.map_service import open_map_session

    settings = get_settings()
    try:
        session = await open_map_session(settings, load_boundaries=False)
    except DataSourceUnavailableError as exc:
        _fail(str(exc))

    store = session.store
    target_year = year or settings.default_year
    state_name = state or store.tables.state_name(state_fips_of(topology_id))
    if not state_name:
        _fail(f"Cannot derive a state from boundary id {topology_id!r}; pass --state")

    await store.ensure_state_processed(target_year, state_name)
    match = store.resolve_geography_key(target_year, state_name, topology_id)
    if match is None:
        logger.debug("Unmatched boundary {} ({}, {})", topology_id, state_name, target_year)
        typer.echo(f"No data for boundary {topology_id} in {state_name.upper()} ({target_year})")
        return

    typer.echo(
        json.dumps(
            {
                "topology_id": topology_id,
                "matched_key": match.matched_key,
                "state": match.result.state,
                "name": match.result.name,
                "winner": match.result.winner,
                "votes": match.result.votes,
            },
            indent=2,
        )
    )
