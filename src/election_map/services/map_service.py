"""Map session bootstrap — load the results table and boundaries into a ResultStore.

A failure to load any data source is fatal to initialization and is
propagated as DataSourceUnavailableError; there is no retry.
"""

import asyncio
from dataclasses import dataclass, field

from loguru import logger

from election_map.core.config import Settings
from election_map.lib.boundary_loader.geojson import BoundaryFeature, BoundaryKind, read_boundary_features
from election_map.lib.geography.reference import load_reference_tables
from election_map.services.result_store import ResultStore


@dataclass
class MapSession:
    """A result store plus the boundary features it is rendered against."""

    store: ResultStore
    year: int
    state_features: list[BoundaryFeature] = field(default_factory=list)
    county_features: list[BoundaryFeature] = field(default_factory=list)

    async def state_fill(self, year: int | None = None) -> dict[str, str | None]:
        """Winner per state feature for the national map."""
        year = year or self.year
        await self.store.ensure_year_processed(year)
        return self.store.state_fill(year, self.state_features)

    async def county_fill(self, state: str, year: int | None = None) -> dict[str, str | None]:
        """Winner per county feature of one state for the statewide map."""
        year = year or self.year
        await self.store.ensure_state_processed(year, state)
        return self.store.county_fill(year, state, self.county_features)


async def open_map_session(settings: Settings, *, load_boundaries: bool = True) -> MapSession:
    """Load every data source named in ``settings`` and process the default year.

    Args:
        settings: Application settings.
        load_boundaries: Skip reading boundary files when False (e.g. for
            text-only queries).

    Returns:
        A ready MapSession.

    Raises:
        DataSourceUnavailableError: If the results table or a boundary file
            cannot be loaded.
        ReferenceDataError: If the reference tables are invalid.
    """
    tables = load_reference_tables(settings.reference_tables_path)
    store = ResultStore(tables=tables, tie_break=settings.tie_break)

    state_features: list[BoundaryFeature] = []
    county_features: list[BoundaryFeature] = []
    if load_boundaries:
        state_features, county_features = await asyncio.gather(
            asyncio.to_thread(read_boundary_features, settings.states_boundary_path, BoundaryKind.STATE),
            asyncio.to_thread(read_boundary_features, settings.counties_boundary_path, BoundaryKind.COUNTY),
        )

    await store.ingest_csv(settings.results_csv_path, batch_size=settings.csv_batch_size)
    await store.ensure_year_processed(settings.default_year)

    logger.info(
        "Map session ready: {} years, {} state and {} county features",
        len(store.available_years()),
        len(state_features),
        len(county_features),
    )
    return MapSession(
        store=store,
        year=settings.default_year,
        state_features=state_features,
        county_features=county_features,
    )
