"""Boundary-id → county result reconciliation with a memoizing match cache."""

from collections.abc import Callable, Mapping

from loguru import logger

from election_map.lib.geography.fips import candidate_keys
from election_map.lib.geography.reference import ReferenceTables
from election_map.lib.tabulator.types import CountyResult, GeographyMatch

CountyLookup = Callable[[int], Mapping[str, CountyResult]]

MatchKey = tuple[int, str, str]


class MatchCache:
    """Memoized reconciliation outcomes keyed by (year, state, topology id).

    Misses are cached too, so a boundary with no election data is only
    searched for once.
    """

    def __init__(self) -> None:
        self._entries: dict[MatchKey, GeographyMatch | None] = {}

    def __contains__(self, key: MatchKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: MatchKey) -> GeographyMatch | None:
        return self._entries.get(key)

    def put(self, key: MatchKey, match: GeographyMatch | None) -> None:
        self._entries[key] = match

    def clear(self) -> None:
        self._entries.clear()


class GeographyReconciler:
    """Resolve boundary county ids to stored county results for a state and year.

    Args:
        counties_for_year: Callable returning the storage key → CountyResult
            mapping for a year.
        tables: Reference tables with boundary-id corrections.
        cache: Match cache shared with the owning result store.
    """

    def __init__(
        self,
        counties_for_year: CountyLookup,
        tables: ReferenceTables,
        cache: MatchCache | None = None,
    ) -> None:
        self._counties_for_year = counties_for_year
        self._tables = tables
        self.cache = cache if cache is not None else MatchCache()

    def resolve(self, year: int, state: str, topology_id: str | int) -> GeographyMatch | None:
        """Return the county result a boundary id corresponds to, or None.

        No match is an expected outcome (e.g. Alaska boroughs, which have no
        row-level election data) and is cached like a hit.
        """
        key = (year, state, str(topology_id))
        if key in self.cache:
            return self.cache.get(key)

        counties = self._counties_for_year(year)
        match: GeographyMatch | None = None
        for candidate in candidate_keys(topology_id, state, year, self._tables):
            result = counties.get(candidate)
            if result is not None and result.state == state:
                match = GeographyMatch(matched_key=candidate, result=result)
                break

        if match is None:
            logger.debug("No county result for {} boundary {} in {}", state, topology_id, year)

        self.cache.put(key, match)
        return match
