"""Versioned geography reference tables.

Identifier exceptions (Alaska district → borough codes, boundary-id
corrections, town-code truncation) are shipped as JSON next to this module
and validated with Pydantic at load time, so corrections can be added
without touching the aggregation or matching code.
"""

import json
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_REFERENCE_PATH = Path(__file__).with_name("data") / "reference_tables.json"


class ReferenceDataError(Exception):
    """Raised when the reference tables cannot be read or fail validation."""


class TopologyCorrection(BaseModel):
    """A boundary id known to differ from the election-data id for the same county."""

    model_config = ConfigDict(frozen=True)

    state: str
    topology_id: str
    election_id: str
    years: list[int] | None = Field(default=None, description="Years the correction applies to; all years when null")
    reason: str = ""

    def applies_to(self, state: str, year: int) -> bool:
        return self.state == state and (self.years is None or year in self.years)


class TownCodeRule(BaseModel):
    """Truncation applied to sub-county codes that should collapse into a county."""

    model_config = ConfigDict(frozen=True)

    length: int = Field(gt=0)
    prefix: int = Field(gt=0)


class ReferenceTables(BaseModel):
    """All identifier reconciliation data used by the tabulator and reconciler."""

    model_config = ConfigDict(frozen=True)

    version: str
    state_fips: dict[str, str]
    district_to_borough: dict[str, dict[str, str]] = Field(default_factory=dict)
    topology_corrections: list[TopologyCorrection] = Field(default_factory=list)
    town_code_states: dict[str, TownCodeRule] = Field(default_factory=dict)
    unmatched_subdivision_notes: dict[str, str] = Field(default_factory=dict)

    @field_validator("state_fips")
    @classmethod
    def _validate_state_fips(cls, v: dict[str, str]) -> dict[str, str]:
        for code in v:
            if len(code) != 2 or not code.isdigit():
                msg = f"State FIPS keys must be two digits, got {code!r}"
                raise ValueError(msg)
        return v

    def state_name(self, state_fips: str) -> str | None:
        """Return the state name for a 1- or 2-digit state FIPS code."""
        return self.state_fips.get(state_fips.zfill(2))

    def state_fips_for(self, state: str) -> str | None:
        """Return the 2-digit FIPS code for a state name."""
        for code, name in self.state_fips.items():
            if name == state:
                return code
        return None

    def storage_key(self, state: str, county_fips: str) -> str:
        """Map an election-data county id to the key its result is stored under."""
        return self.district_to_borough.get(state, {}).get(county_fips, county_fips)

    def normalize_county_id(self, state: str, county_fips: str) -> str:
        """Collapse sub-county town codes into their county prefix."""
        rule = self.town_code_states.get(state)
        if rule is not None and len(county_fips) == rule.length:
            return county_fips[: rule.prefix]
        return county_fips

    def correct_topology_id(self, state: str, year: int, topology_id: str) -> str:
        """Apply the first matching boundary-id correction, if any."""
        for correction in self.topology_corrections:
            if correction.topology_id == topology_id and correction.applies_to(state, year):
                return correction.election_id
        return topology_id


def load_reference_tables(path: Path | None = None) -> ReferenceTables:
    """Load and validate reference tables from JSON.

    Args:
        path: Optional override; defaults to the tables bundled with the package.

    Returns:
        Validated ReferenceTables.

    Raises:
        ReferenceDataError: If the file is missing, is not JSON, or fails validation.
    """
    if path is None:
        return _load_default_reference_tables()
    return _read_reference_tables(path)


@lru_cache(maxsize=1)
def _load_default_reference_tables() -> ReferenceTables:
    return _read_reference_tables(DEFAULT_REFERENCE_PATH)


def _read_reference_tables(path: Path) -> ReferenceTables:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Cannot read reference tables from {path}: {exc}"
        raise ReferenceDataError(msg) from exc

    try:
        tables = ReferenceTables.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid reference tables in {path}: {exc}"
        raise ReferenceDataError(msg) from exc

    logger.debug("Loaded reference tables version {} from {}", tables.version, path)
    return tables
