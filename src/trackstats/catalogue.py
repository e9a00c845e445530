"""Named analyses over the track dataset, from simple filters to window queries."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from trackstats import engine
from trackstats.models import GroupValue, Track

logger = logging.getLogger(__name__)

STREAM_THRESHOLD = 1_000_000_000
TOP_ENERGY_COUNT = 5
TOP_VIEWED_PER_ARTIST = 3
ENERGY_LIVENESS_RATIO = 1.2

LEVELS = ("easy", "medium", "advanced")


@dataclass(frozen=True)
class Query:
    name: str
    level: str
    description: str
    run: Callable[[Sequence[Track]], list]


def _licensed_comments(tracks: Sequence[Track]) -> list[GroupValue]:
    total = engine.conditional_sum(tracks, "comments", engine.where("licensed", "=", True))
    return [GroupValue("total_comments", total)]


def _album_danceability(tracks: Sequence[Track]) -> list[GroupValue]:
    rows = engine.group_aggregate(tracks, "album", "danceability", "avg")
    # All-null albums average to None and go last.
    return sorted(rows, key=lambda r: (r.value is not None, r.value or 0), reverse=True)


_QUERY_LIST = [
    Query(
        "billion_streams",
        "easy",
        "Tracks with more than 1 billion streams",
        lambda t: engine.filter_by_threshold(t, "stream", ">", STREAM_THRESHOLD),
    ),
    Query(
        "albums_with_artists",
        "easy",
        "All albums with their respective artists",
        lambda t: engine.distinct_pairs(t, "album", "artist"),
    ),
    Query(
        "licensed_comments",
        "easy",
        "Total number of comments for licensed tracks",
        _licensed_comments,
    ),
    Query(
        "single_tracks",
        "easy",
        "Tracks that belong to the album type 'single'",
        lambda t: engine.filter_equals(t, "album_type", "single"),
    ),
    Query(
        "tracks_per_artist",
        "easy",
        "Total number of tracks by each artist",
        lambda t: engine.group_count(t, "artist", "track"),
    ),
    Query(
        "album_danceability",
        "medium",
        "Average danceability of tracks in each album",
        _album_danceability,
    ),
    Query(
        "top_energy",
        "medium",
        "Top 5 tracks with the highest energy",
        lambda t: engine.top_n(t, "energy", TOP_ENERGY_COUNT),
    ),
    Query(
        "official_video_engagement",
        "medium",
        "Views and likes of tracks with an official video",
        lambda t: engine.filter_equals(t, "official_video", True),
    ),
    Query(
        "album_views",
        "medium",
        "Total views of all tracks in each album",
        lambda t: engine.group_aggregate(t, "album", "views", "sum"),
    ),
    Query(
        "spotify_over_youtube",
        "medium",
        "Tracks streamed more on Spotify than on YouTube",
        engine.comparative_platform_streams,
    ),
    Query(
        "top_viewed_per_artist",
        "advanced",
        "Top 3 most-viewed tracks for each artist",
        lambda t: engine.rank_within_group(t, "artist", "views", TOP_VIEWED_PER_ARTIST),
    ),
    Query(
        "above_average_liveness",
        "advanced",
        "Tracks whose liveness is above the average",
        lambda t: engine.above_average(t, "liveness"),
    ),
    Query(
        "album_energy_range",
        "advanced",
        "Difference between highest and lowest energy in each album",
        lambda t: engine.group_range(t, "album", "energy"),
    ),
    Query(
        "energy_liveness_ratio",
        "advanced",
        "Tracks with an energy-to-liveness ratio above 1.2",
        lambda t: engine.ratio_filter(t, "energy", "liveness", ENERGY_LIVENESS_RATIO),
    ),
    Query(
        "cumulative_likes",
        "advanced",
        "Cumulative likes of tracks ordered by views",
        lambda t: engine.cumulative_aggregate(t, "views", "likes"),
    ),
]

QUERIES: dict[str, Query] = {q.name: q for q in _QUERY_LIST}


def queries_by_level(level: str) -> list[Query]:
    return [q for q in QUERIES.values() if q.level == level]


def run_query(name: str, tracks: Sequence[Track]) -> list:
    """Run a named analysis. Raises KeyError for unknown names."""
    if name not in QUERIES:
        raise KeyError(f"Unknown query: {name}")
    rows = QUERIES[name].run(tracks)
    logger.debug("Query %s returned %d rows", name, len(rows))
    return rows
