"""Boundary loader library — decoded state and county boundary features.

Public API:
    - read_boundary_features: Read a GeoJSON FeatureCollection file
    - parse_feature_collection: Convert an already-decoded collection
    - BoundaryFeature: Feature with normalized FIPS identifier and geometry
    - BoundaryKind: State or county collection
"""

from election_map.lib.boundary_loader.geojson import (
    BoundaryFeature,
    BoundaryKind,
    parse_feature_collection,
    read_boundary_features,
)

__all__ = [
    "BoundaryFeature",
    "BoundaryKind",
    "parse_feature_collection",
    "read_boundary_features",
]
