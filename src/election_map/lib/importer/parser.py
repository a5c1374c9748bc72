"""County results CSV parser with delimiter/encoding detection and chunked reading.

Reads the multi-year county presidential results export (one row per
candidate per county per reporting mode) into RawRow records. Values are
kept as strings; validation is the aggregator's job.
"""

from collections.abc import Iterator
from pathlib import Path

import pandas as pd
from loguru import logger

from election_map.lib.tabulator.types import RESULT_COLUMN_MAP, RawRow

# Columns every results file must provide; mode is optional in older exports
REQUIRED_COLUMNS: frozenset[str] = frozenset(RESULT_COLUMN_MAP) - {"mode"}


class DataSourceUnavailableError(Exception):
    """Raised when a results table or boundary collection cannot be loaded."""

    def __init__(self, message: str, source: Path | str | None = None):
        super().__init__(message)
        self.source = source


def detect_delimiter(file_path: Path) -> str:
    """Detect the CSV delimiter by reading the first line.

    Args:
        file_path: Path to the CSV file.

    Returns:
        The detected delimiter character.

    Raises:
        ValueError: If the delimiter cannot be detected.
    """
    encoding = detect_encoding(file_path)
    with file_path.open("r", encoding=encoding) as f:
        first_line = f.readline()

    counts = {
        ",": first_line.count(","),
        "|": first_line.count("|"),
        "\t": first_line.count("\t"),
    }
    delimiter = max(counts, key=counts.get)  # type: ignore[arg-type]
    if counts[delimiter] == 0:
        msg = f"Cannot detect delimiter in {file_path}"
        raise ValueError(msg)

    logger.debug(f"Detected delimiter: {delimiter!r} for {file_path}")
    return delimiter


def detect_encoding(file_path: Path) -> str:
    """Detect file encoding by attempting to read with common encodings.

    Raises:
        ValueError: If encoding cannot be detected.
    """
    for encoding in ("utf-8", "latin-1"):
        try:
            with file_path.open("r", encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue
    msg = f"Cannot detect encoding for {file_path}"
    raise ValueError(msg)


def parse_results_chunks(file_path: Path, batch_size: int = 50000) -> Iterator[pd.DataFrame]:
    """Parse a results CSV in chunks, with columns renamed to RawRow fields.

    Args:
        file_path: Path to the CSV file.
        batch_size: Number of rows per chunk.

    Yields:
        DataFrame chunks holding only the known result columns.

    Raises:
        ValueError: If the file cannot be parsed or lacks required columns.
    """
    delimiter = detect_delimiter(file_path)
    encoding = detect_encoding(file_path)

    logger.info(f"Parsing {file_path} with delimiter={delimiter!r}, encoding={encoding}, batch_size={batch_size}")

    reader = pd.read_csv(
        file_path,
        sep=delimiter,
        encoding=encoding,
        chunksize=batch_size,
        dtype=str,
        keep_default_na=False,
    )

    rename_map: dict[str, str] | None = None

    for chunk in reader:
        chunk.columns = chunk.columns.str.strip()

        if rename_map is None:
            rename_map = {c: RESULT_COLUMN_MAP[c.lower()] for c in chunk.columns if c.lower() in RESULT_COLUMN_MAP}
            present = {c.lower() for c in rename_map}
            missing = sorted(REQUIRED_COLUMNS - present)
            if missing:
                msg = f"Results file {file_path} is missing required columns: {missing}"
                raise ValueError(msg)
            for csv_col in chunk.columns:
                if csv_col not in rename_map:
                    logger.debug(f"Ignoring unknown CSV column: {csv_col!r}")

        chunk = chunk.rename(columns=rename_map)
        yield chunk[list(rename_map.values())]


def iter_result_rows(file_path: Path, batch_size: int = 50000) -> Iterator[RawRow]:
    """Yield RawRow records from a results CSV in file order."""
    for chunk in parse_results_chunks(file_path, batch_size=batch_size):
        for record in chunk.to_dict(orient="records"):
            yield RawRow.from_record(record)


def read_results_csv(file_path: Path, batch_size: int = 50000) -> list[RawRow]:
    """Read a whole results CSV into memory.

    Args:
        file_path: Path to the CSV file.
        batch_size: Rows per parsing chunk.

    Returns:
        All rows, in file order.

    Raises:
        DataSourceUnavailableError: If the file is missing, unreadable, or
            does not look like a results table.
    """
    if not file_path.is_file():
        msg = f"Results file not found: {file_path}"
        raise DataSourceUnavailableError(msg, source=file_path)

    try:
        rows = list(iter_result_rows(file_path, batch_size=batch_size))
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        msg = f"Failed to load results from {file_path}: {exc}"
        logger.error(msg)
        raise DataSourceUnavailableError(msg, source=file_path) from exc

    logger.info("Loaded {} records from {}", len(rows), file_path)
    return rows
