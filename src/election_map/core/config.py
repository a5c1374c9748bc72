"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables (prefix
``ELECTION_MAP_``) or a ``.env`` file.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from election_map.lib.tabulator.types import TieBreak


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ELECTION_MAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Data sources
    results_csv_path: Path = Field(
        default=Path("./data/countypres_2000-2024.csv"),
        description="County-level results table (one row per candidate, county and reporting mode)",
    )
    states_boundary_path: Path = Field(
        default=Path("./data/states.geojson"),
        description="State boundary FeatureCollection",
    )
    counties_boundary_path: Path = Field(
        default=Path("./data/counties.geojson"),
        description="County boundary FeatureCollection",
    )
    reference_tables_path: Path | None = Field(
        default=None,
        description="Override for the bundled geography reference tables",
    )
    csv_batch_size: int = Field(
        default=50000,
        description="Rows per chunk when reading the results table",
        gt=0,
    )

    # Tabulation
    default_year: int = Field(
        default=2024,
        description="Year shown when none is requested",
        ge=1789,
    )
    tie_break: TieBreak = Field(
        default=TieBreak.SCAN_ORDER,
        description="Rule for tied leaders: scan_order (first in tally order) or alphabetical",
    )

    @field_validator("tie_break", mode="before")
    @classmethod
    def _normalize_tie_break(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
