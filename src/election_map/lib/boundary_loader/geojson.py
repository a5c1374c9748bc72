"""GeoJSON reader — parses state/county boundary collections into BoundaryFeatures.

Features must carry an identifier (feature ``id`` or a GEOID-style
property) from which the 2-digit state FIPS and, for counties, the 5-digit
county FIPS are derived.
"""

import json
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from loguru import logger
from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry

from election_map.lib.importer.parser import DataSourceUnavailableError

_ID_PROPERTIES = ("GEOID", "GEOID20", "FIPS", "fips", "id", "ID")
_NAME_PROPERTIES = ("name", "NAME", "NAMELSAD")


class BoundaryKind(StrEnum):
    """Granularity of a boundary collection."""

    STATE = "state"
    COUNTY = "county"


_ID_WIDTH = {BoundaryKind.STATE: 2, BoundaryKind.COUNTY: 5}


@dataclass
class BoundaryFeature:
    """A decoded boundary feature with its normalized identifier."""

    identifier: str
    name: str
    kind: BoundaryKind
    geometry: BaseGeometry
    properties: dict = field(default_factory=dict)

    @property
    def state_fips(self) -> str:
        return self.identifier[:2]

    @property
    def county_fips(self) -> str | None:
        return self.identifier if self.kind is BoundaryKind.COUNTY else None


def _feature_identifier(feature: dict, props: dict) -> str | None:
    raw = feature.get("id")
    if raw is None:
        raw = next((props[key] for key in _ID_PROPERTIES if props.get(key) not in (None, "")), None)
    if raw is None:
        return None
    text = str(raw).strip()
    return text if text.isdigit() else None


def parse_feature_collection(data: dict, kind: BoundaryKind, source: str = "<memory>") -> list[BoundaryFeature]:
    """Convert a decoded GeoJSON FeatureCollection into BoundaryFeatures.

    Args:
        data: Decoded GeoJSON object.
        kind: Whether the collection holds states or counties.
        source: Label used in log and error messages.

    Returns:
        Parsed features; features without geometry or a numeric identifier
        are skipped.

    Raises:
        DataSourceUnavailableError: If ``data`` is not a non-empty FeatureCollection.
    """
    if data.get("type") != "FeatureCollection":
        msg = f"Expected FeatureCollection in {source}, got {data.get('type')}"
        raise DataSourceUnavailableError(msg, source=source)

    raw_features = data.get("features") or []
    if not raw_features:
        msg = f"GeoJSON has no features: {source}"
        raise DataSourceUnavailableError(msg, source=source)

    width = _ID_WIDTH[kind]
    features: list[BoundaryFeature] = []

    for i, feature in enumerate(raw_features):
        geom_data = feature.get("geometry")
        if not geom_data:
            continue

        props = feature.get("properties", {}) or {}
        identifier = _feature_identifier(feature, props)
        if identifier is None:
            logger.warning(f"Skipping {kind} feature {i} in {source}: no numeric identifier")
            continue

        geom = shape(geom_data)
        if isinstance(geom, Polygon):
            geom = MultiPolygon([geom])

        if not geom.is_valid:
            logger.warning(f"Feature {i} has invalid geometry, attempting repair")
            geom = geom.buffer(0)
            if isinstance(geom, Polygon):
                geom = MultiPolygon([geom])

        name = next((props[key] for key in _NAME_PROPERTIES if props.get(key)), f"{kind.title()} {identifier}")

        features.append(
            BoundaryFeature(
                identifier=identifier.zfill(width),
                name=str(name),
                kind=kind,
                geometry=geom,
                properties=props,
            )
        )

    logger.info(f"Parsed {len(features)} {kind} features from {source}")
    return features


def read_boundary_features(file_path: Path, kind: BoundaryKind) -> list[BoundaryFeature]:
    """Read a GeoJSON boundary file.

    Args:
        file_path: Path to a .geojson or .json FeatureCollection.
        kind: Whether the file holds states or counties.

    Returns:
        List of BoundaryFeature objects.

    Raises:
        DataSourceUnavailableError: If the file is missing, is not JSON, or
            is not a usable FeatureCollection.
    """
    logger.info(f"Reading GeoJSON: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Failed to load boundaries from {file_path}: {exc}"
        logger.error(msg)
        raise DataSourceUnavailableError(msg, source=file_path) from exc

    return parse_feature_collection(data, kind, source=str(file_path))
