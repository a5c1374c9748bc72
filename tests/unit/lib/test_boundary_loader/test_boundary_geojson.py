"""Unit tests for the state/county GeoJSON boundary reader."""

import json
from pathlib import Path

import pytest
from shapely.geometry import MultiPolygon

from election_map.lib.boundary_loader.geojson import (
    BoundaryKind,
    parse_feature_collection,
    read_boundary_features,
)
from election_map.lib.importer.parser import DataSourceUnavailableError

SQUARE = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]}


def _collection(*features: dict) -> dict:
    return {"type": "FeatureCollection", "features": list(features)}


class TestParseFeatureCollection:
    """Tests for GeoJSON feature parsing."""

    def test_county_id_from_feature_id(self) -> None:
        """A numeric feature id is zero-padded to a 5-digit county code."""
        data = _collection({"type": "Feature", "id": 1009, "properties": {"name": "Blount"}, "geometry": SQUARE})
        features = parse_feature_collection(data, BoundaryKind.COUNTY)
        assert len(features) == 1
        feature = features[0]
        assert feature.identifier == "01009"
        assert feature.county_fips == "01009"
        assert feature.state_fips == "01"
        assert feature.name == "Blount"

    def test_state_id_from_geoid_property(self) -> None:
        """Without a feature id, GEOID-style properties are used."""
        data = _collection({"type": "Feature", "properties": {"GEOID": "2", "NAME": "Alaska"}, "geometry": SQUARE})
        feature = parse_feature_collection(data, BoundaryKind.STATE)[0]
        assert feature.identifier == "02"
        assert feature.county_fips is None

    def test_polygon_to_multipolygon(self) -> None:
        """Single polygons are promoted to MultiPolygon."""
        data = _collection({"type": "Feature", "id": "13121", "properties": {}, "geometry": SQUARE})
        feature = parse_feature_collection(data, BoundaryKind.COUNTY)[0]
        assert isinstance(feature.geometry, MultiPolygon)

    def test_default_name(self) -> None:
        """Features without a name property get a generated one."""
        data = _collection({"type": "Feature", "id": "13121", "properties": {}, "geometry": SQUARE})
        assert parse_feature_collection(data, BoundaryKind.COUNTY)[0].name == "County 13121"

    def test_skips_unusable_features(self) -> None:
        """Features without geometry or a numeric id are skipped."""
        data = _collection(
            {"type": "Feature", "id": "13121", "properties": {}, "geometry": None},
            {"type": "Feature", "id": "abc", "properties": {}, "geometry": SQUARE},
            {"type": "Feature", "id": "13209", "properties": {}, "geometry": SQUARE},
        )
        features = parse_feature_collection(data, BoundaryKind.COUNTY)
        assert [f.identifier for f in features] == ["13209"]

    def test_not_a_feature_collection(self) -> None:
        """Other GeoJSON types are rejected."""
        with pytest.raises(DataSourceUnavailableError, match="Expected FeatureCollection"):
            parse_feature_collection({"type": "Topology"}, BoundaryKind.STATE)

    def test_empty_collection(self) -> None:
        """A collection with no features is rejected."""
        with pytest.raises(DataSourceUnavailableError, match="no features"):
            parse_feature_collection(_collection(), BoundaryKind.STATE)


class TestReadBoundaryFeatures:
    """Tests for reading boundary files."""

    def test_reads_file(self, tmp_path: Path) -> None:
        """A GeoJSON file on disk is parsed."""
        path = tmp_path / "counties.geojson"
        path.write_text(
            json.dumps(_collection({"type": "Feature", "id": "44005", "properties": {}, "geometry": SQUARE})),
            encoding="utf-8",
        )
        features = read_boundary_features(path, BoundaryKind.COUNTY)
        assert features[0].identifier == "44005"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises DataSourceUnavailableError."""
        with pytest.raises(DataSourceUnavailableError):
            read_boundary_features(tmp_path / "absent.geojson", BoundaryKind.COUNTY)

    def test_invalid_json(self, tmp_path: Path) -> None:
        """A corrupt file raises DataSourceUnavailableError."""
        path = tmp_path / "broken.geojson"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(DataSourceUnavailableError, match="Failed to load"):
            read_boundary_features(path, BoundaryKind.STATE)
