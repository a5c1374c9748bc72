"""Geography library — reconcile boundary identifiers with election-data keys.

Public API:
    - candidate_keys: Ordered storage-key candidates for a boundary id
    - GeographyReconciler: Cached boundary-id → county result resolution
    - MatchCache: Memoized reconciliation outcomes
    - ReferenceTables: Versioned identifier exception tables
    - load_reference_tables: Load and validate reference tables
"""

from election_map.lib.geography.fips import candidate_keys, pad_county_fips, state_fips_of
from election_map.lib.geography.reconciler import GeographyReconciler, MatchCache
from election_map.lib.geography.reference import (
    DEFAULT_REFERENCE_PATH,
    ReferenceDataError,
    ReferenceTables,
    TopologyCorrection,
    load_reference_tables,
)

__all__ = [
    "DEFAULT_REFERENCE_PATH",
    "GeographyReconciler",
    "MatchCache",
    "ReferenceDataError",
    "ReferenceTables",
    "TopologyCorrection",
    "candidate_keys",
    "load_reference_tables",
    "pad_county_fips",
    "state_fips_of",
]
