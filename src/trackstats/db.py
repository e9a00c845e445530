"""LanceDB schema and read/write operations for the track store."""

import logging
import os
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path

import lancedb
import pyarrow as pa
from tqdm import tqdm

from trackstats.models import BOOL_FIELDS, FIELD_ORDER, INT_FIELDS, NUMERIC_FIELDS, Track

logger = logging.getLogger(__name__)

DB_PATH = Path(os.getenv("TRACKSTATS_HOME", Path.home() / ".local" / "share" / "trackstats"))

TABLE_NAME = "tracks"
BATCH_SIZE = 1000


def _arrow_type(name: str) -> pa.DataType:
    if name in INT_FIELDS:
        return pa.int64()
    if name in NUMERIC_FIELDS:
        return pa.float64()
    if name in BOOL_FIELDS:
        return pa.bool_()
    return pa.string()


# Mirrors the column list of the original spotify table.
TRACKS_SCHEMA = pa.schema([pa.field(name, _arrow_type(name)) for name in FIELD_ORDER])


def get_db(path: Path | None = None) -> lancedb.DBConnection:
    path = Path(path) if path is not None else DB_PATH
    path.mkdir(parents=True, exist_ok=True)
    return lancedb.connect(str(path))


def get_or_create_tracks(db: lancedb.DBConnection) -> lancedb.table.Table:
    if TABLE_NAME in db.table_names():
        return db.open_table(TABLE_NAME)
    return db.create_table(TABLE_NAME, schema=TRACKS_SCHEMA)


def replace_tracks(db: lancedb.DBConnection, tracks: Sequence[Track]) -> lancedb.table.Table:
    """Overwrite the tracks table with ``tracks``, inserting in batches."""
    table = db.create_table(TABLE_NAME, schema=TRACKS_SCHEMA, mode="overwrite")
    batches = range(0, len(tracks), BATCH_SIZE)
    for start in tqdm(batches, desc="Importing tracks", unit="batch"):
        rows = [asdict(t) for t in tracks[start : start + BATCH_SIZE]]
        table.add(pa.Table.from_pylist(rows, schema=TRACKS_SCHEMA))
    logger.debug("Stored %d tracks in %s", len(tracks), TABLE_NAME)
    return table


def load_tracks(table: lancedb.table.Table) -> list[Track]:
    return [Track(**row) for row in table.to_arrow().select(list(FIELD_ORDER)).to_pylist()]


def track_count(table: lancedb.table.Table) -> int:
    return table.count_rows()
