"""Importer library — read the county results table into raw rows.

Public API:
    - read_results_csv: Load a results CSV into RawRow records
    - iter_result_rows: Stream RawRow records from a results CSV
    - parse_results_chunks: Chunked DataFrame reader with column mapping
    - DataSourceUnavailableError: Source missing or unreadable
"""

from election_map.lib.importer.parser import (
    DataSourceUnavailableError,
    detect_delimiter,
    detect_encoding,
    iter_result_rows,
    parse_results_chunks,
    read_results_csv,
)

__all__ = [
    "DataSourceUnavailableError",
    "detect_delimiter",
    "detect_encoding",
    "iter_result_rows",
    "parse_results_chunks",
    "read_results_csv",
]
