"""Tests for the LanceDB track store."""

from pathlib import Path

from trackstats.db import (
    TRACKS_SCHEMA,
    get_db,
    get_or_create_tracks,
    load_tracks,
    replace_tracks,
    track_count,
)
from trackstats.models import FIELD_ORDER, Track


def test_schema_covers_every_field() -> None:
    assert TRACKS_SCHEMA.names == list(FIELD_ORDER)


def test_empty_store(tmp_path: Path) -> None:
    table = get_or_create_tracks(get_db(tmp_path))
    assert track_count(table) == 0
    assert load_tracks(table) == []


def test_replace_and_load(tmp_path: Path, tracks: list[Track]) -> None:
    db = get_db(tmp_path)
    replace_tracks(db, tracks)
    table = get_or_create_tracks(db)
    assert track_count(table) == len(tracks)
    assert load_tracks(table) == tracks


def test_replace_overwrites(tmp_path: Path, tracks: list[Track]) -> None:
    db = get_db(tmp_path)
    replace_tracks(db, tracks)
    replace_tracks(db, tracks[:2])
    assert track_count(get_or_create_tracks(db)) == 2
