"""Unit tests for the geography reference tables."""

import json
from pathlib import Path

import pytest

from election_map.lib.geography.reference import ReferenceDataError, ReferenceTables, load_reference_tables


class TestBundledTables:
    """Tests for the tables shipped with the package."""

    def test_loads(self, reference_tables: ReferenceTables) -> None:
        """Bundled tables validate and carry a version."""
        assert reference_tables.version

    def test_alaska_has_32_districts(self, reference_tables: ReferenceTables) -> None:
        """Every Alaska legislative district maps to a borough."""
        districts = reference_tables.district_to_borough["ALASKA"]
        assert len(districts) == 32
        assert districts["2001"] == "02240"
        assert all(code.startswith("02") for code in districts.values())

    def test_state_names(self, reference_tables: ReferenceTables) -> None:
        """State names resolve from 1- or 2-digit FIPS codes."""
        assert reference_tables.state_name("13") == "GEORGIA"
        assert reference_tables.state_name("1") == "ALABAMA"
        assert reference_tables.state_name("99") is None
        assert reference_tables.state_fips_for("RHODE ISLAND") == "44"

    def test_storage_key(self, reference_tables: ReferenceTables) -> None:
        """Only Alaska districts are remapped."""
        assert reference_tables.storage_key("ALASKA", "2001") == "02240"
        assert reference_tables.storage_key("GEORGIA", "2001") == "2001"

    def test_normalize_county_id(self, reference_tables: ReferenceTables) -> None:
        """Rhode Island town codes are truncated to their county."""
        assert reference_tables.normalize_county_id("RHODE ISLAND", "4400500000") == "44005"
        assert reference_tables.normalize_county_id("RHODE ISLAND", "44005") == "44005"

    def test_correct_topology_id(self, reference_tables: ReferenceTables) -> None:
        """The Georgia boundary correction applies in 2024 only."""
        assert reference_tables.correct_topology_id("GEORGIA", 2024, "13211") == "13209"
        assert reference_tables.correct_topology_id("GEORGIA", 2020, "13211") == "13211"


class TestLoadReferenceTables:
    """Tests for loading override files."""

    def test_override_path(self, tmp_path: Path) -> None:
        """A custom file replaces the bundled tables."""
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"version": "test", "state_fips": {"13": "GEORGIA"}}), encoding="utf-8")
        tables = load_reference_tables(path)
        assert tables.version == "test"
        assert tables.district_to_borough == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ReferenceDataError."""
        with pytest.raises(ReferenceDataError, match="Cannot read"):
            load_reference_tables(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON raises ReferenceDataError."""
        path = tmp_path / "tables.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ReferenceDataError):
            load_reference_tables(path)

    def test_invalid_state_code(self, tmp_path: Path) -> None:
        """State FIPS keys must be two digits."""
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"version": "x", "state_fips": {"1": "ALABAMA"}}), encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="Invalid reference tables"):
            load_reference_tables(path)
