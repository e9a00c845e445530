"""Load the Spotify/YouTube track dataset from CSV into Track records."""

import logging
import math
from pathlib import Path

import pyarrow as pa
import pyarrow.csv as pv

from trackstats.errors import InvalidFieldError
from trackstats.models import (
    ALL_FIELDS,
    BOOL_FIELDS,
    INT_FIELDS,
    NUMERIC_FIELDS,
    Track,
)

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("artist", "track")

# Column names used by the raw Kaggle export
COLUMN_ALIASES = {
    "most_playedon": "most_played_on",
    "energyliveness": "energy_liveness",
}

TRUE_STRINGS = {"true", "t", "yes", "1"}


def _normalize_column(name: str) -> str:
    name = name.strip().lower().replace(" ", "_")
    return COLUMN_ALIASES.get(name, name)


def _as_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def _as_int(value: object) -> int | None:
    result = _as_float(value)
    if result is None or math.isinf(result):
        return None
    return int(result)


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    if value is None:
        return False
    return bool(value)


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _coerce(field_name: str, value: object) -> object:
    if field_name in INT_FIELDS:
        return _as_int(value)
    if field_name in NUMERIC_FIELDS:
        return _as_float(value)
    if field_name in BOOL_FIELDS:
        return _as_bool(value)
    return _as_text(value)


def row_to_track(row: dict) -> Track:
    """Build a Track from a row keyed by normalized column names.

    Unknown keys are ignored; ``duration_ms`` is converted to ``duration_min``
    when the latter is missing.
    """
    values = {k: _coerce(k, v) for k, v in row.items() if k in ALL_FIELDS}
    if values.get("duration_min") is None and "duration_ms" in row:
        duration_ms = _as_float(row["duration_ms"])
        if duration_ms is not None:
            values["duration_min"] = duration_ms / 60000
    return Track(**values)


def load_csv(path: Path, drop_zero_duration: bool = True) -> list[Track]:
    """Read a dataset CSV and return its rows as Track records.

    Rows with a zero ``duration_min`` are dropped unless
    ``drop_zero_duration`` is False.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Dataset not found: {path}")

    # Every column is read as text and coerced per field below.
    with pv.open_csv(str(path)) as reader:
        header = reader.schema.names
    column_types = {name: pa.string() for name in header}
    table = pv.read_csv(str(path), convert_options=pv.ConvertOptions(column_types=column_types))
    table = table.rename_columns([_normalize_column(c) for c in table.column_names])

    for column in REQUIRED_COLUMNS:
        if column not in table.column_names:
            raise InvalidFieldError(column, table.column_names)

    ignored = sorted(
        set(table.column_names) - ALL_FIELDS - {"duration_ms"}
    )
    if ignored:
        logger.debug("Ignoring columns: %s", ", ".join(ignored))

    tracks = [row_to_track(row) for row in table.to_pylist()]
    total = len(tracks)
    if drop_zero_duration:
        tracks = [t for t in tracks if t.duration_min != 0]
        if len(tracks) < total:
            logger.info("Dropped %d rows with zero duration", total - len(tracks))

    logger.debug("Loaded %d tracks from %s", len(tracks), path)
    return tracks

