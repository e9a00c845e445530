"""CLI entrypoint for trackstats."""

import logging
from pathlib import Path

import typer

from trackstats.errors import InvalidFieldError
from trackstats.models import (
    CumulativeTrack,
    GroupValue,
    PlatformStreams,
    RankedTrack,
    RatioTrack,
    Track,
)

app = typer.Typer(
    name="trackstats",
    help="Analytical queries over Spotify/YouTube track metadata",
    no_args_is_help=True,
)

CSV_OPTION_HELP = "Read tracks from this CSV instead of the imported store"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _load(csv: Path | None) -> list[Track]:
    if csv is not None:
        from trackstats.loader import load_csv

        try:
            return load_csv(csv)
        except (FileNotFoundError, InvalidFieldError) as e:
            _fail(str(e))

    from trackstats.db import get_db, get_or_create_tracks, load_tracks

    tracks = load_tracks(get_or_create_tracks(get_db()))
    if not tracks:
        _fail("No tracks in store. Run 'trackstats import' first.")
    return tracks


def _format_track(t: Track) -> str:
    return f"{t.artist} - {t.track} ({t.album})"


def _format_row(row: object) -> str:
    if isinstance(row, Track):
        return _format_track(row)
    if isinstance(row, GroupValue):
        value = f"{row.value:.3f}" if isinstance(row.value, float) else row.value
        return f"{row.key}: {value}"
    if isinstance(row, PlatformStreams):
        return f"{row.track}: youtube={row.streamed_on_youtube} spotify={row.streamed_on_spotify}"
    if isinstance(row, RankedTrack):
        return f"#{row.rank} {_format_track(row.record)}"
    if isinstance(row, RatioTrack):
        return f"{_format_track(row.record)} [{row.ratio:.3f}]"
    if isinstance(row, CumulativeTrack):
        return f"{_format_track(row.record)} [{row.cumulative}]"
    if isinstance(row, tuple):
        return " | ".join(str(v) for v in row)
    return str(row)


def _echo_rows(rows: list, limit: int | None = None) -> None:
    shown = rows if limit is None else rows[:limit]
    for i, row in enumerate(shown, 1):
        typer.echo(f"  {i:3d}. {_format_row(row)}")
    if len(shown) < len(rows):
        typer.echo(f"  ... {len(rows) - len(shown)} more")


@app.command("import")
def import_(
    csv: Path = typer.Argument(..., help="Path to the dataset CSV"),
    keep_zero_duration: bool = typer.Option(
        False, "--keep-zero-duration", help="Keep rows whose duration is 0"
    ),
) -> None:
    """Load a dataset CSV into the track store, replacing its contents."""
    from trackstats.db import get_db, replace_tracks
    from trackstats.loader import load_csv

    try:
        tracks = load_csv(csv, drop_zero_duration=not keep_zero_duration)
    except (FileNotFoundError, InvalidFieldError) as e:
        _fail(str(e))

    typer.echo(f"Importing {csv}...")
    replace_tracks(get_db(), tracks)
    typer.echo(f"Done: {len(tracks)} tracks")


@app.command()
def info() -> None:
    """Show how many tracks are stored."""
    from trackstats.db import get_db, get_or_create_tracks, track_count

    typer.echo(f"Tracks: {track_count(get_or_create_tracks(get_db()))}")


@app.command()
def queries() -> None:
    """List the named analyses."""
    from trackstats.catalogue import LEVELS, queries_by_level

    for level in LEVELS:
        typer.echo(f"\n{level.capitalize()}:")
        for q in queries_by_level(level):
            typer.echo(f"  {q.name}: {q.description}")


@app.command()
def run(
    name: str = typer.Argument(..., help="Query name (see 'trackstats queries')"),
    csv: Path | None = typer.Option(None, "--csv", help=CSV_OPTION_HELP),
    limit: int | None = typer.Option(None, "-n", help="Maximum rows to print"),
) -> None:
    """Run a named analysis."""
    from trackstats.catalogue import QUERIES, run_query

    if name not in QUERIES:
        _fail(f"Unknown query: {name}")

    rows = run_query(name, _load(csv))
    typer.echo(f"\n{QUERIES[name].description}\n")
    if not rows:
        typer.echo("No results")
        return
    _echo_rows(rows, limit)


@app.command()
def top(
    field: str = typer.Argument(..., help="Numeric field to sort by"),
    n: int = typer.Option(10, "-n", help="Number of results"),
    asc: bool = typer.Option(False, "--asc", help="Lowest values first"),
    csv: Path | None = typer.Option(None, "--csv", help=CSV_OPTION_HELP),
) -> None:
    """Show the tracks with the highest (or lowest) value of a field."""
    from trackstats.engine import top_n

    tracks = _load(csv)
    try:
        rows = top_n(tracks, field, n, descending=not asc)
    except ValueError as e:
        _fail(str(e))

    typer.echo(f"\nTop {len(rows)} by {field}:\n")
    for i, t in enumerate(rows, 1):
        typer.echo(f"  {i:3d}. {_format_track(t)} [{getattr(t, field)}]")


@app.command()
def rank(
    group: str = typer.Argument(..., help="Field to group by"),
    metric: str = typer.Argument(..., help="Numeric field to rank on"),
    k: int = typer.Option(3, "-k", help="Highest rank to keep per group"),
    csv: Path | None = typer.Option(None, "--csv", help=CSV_OPTION_HELP),
) -> None:
    """Dense-rank tracks by a metric within each group."""
    from trackstats.engine import rank_within_group

    tracks = _load(csv)
    try:
        rows = rank_within_group(tracks, group, metric, k)
    except InvalidFieldError as e:
        _fail(str(e))

    current = object()
    for row in rows:
        key = getattr(row.record, group)
        if key != current:
            typer.echo(f"\n{key}:")
            current = key
        typer.echo(f"  #{row.rank} {row.record.track} [{getattr(row.record, metric)}]")


if __name__ == "__main__":
    app()
