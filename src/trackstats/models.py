"""Data models for track records and derived result rows."""

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class Track:
    artist: str
    track: str
    album: str = ""
    album_type: str = ""
    danceability: float | None = None
    energy: float | None = None
    loudness: float | None = None
    speechiness: float | None = None
    acousticness: float | None = None
    instrumentalness: float | None = None
    liveness: float | None = None
    valence: float | None = None
    tempo: float | None = None
    duration_min: float | None = None
    title: str = ""
    channel: str = ""
    views: float | None = None
    likes: int | None = None
    comments: int | None = None
    licensed: bool = False
    official_video: bool = False
    stream: int | None = None
    energy_liveness: float | None = None
    most_played_on: str = ""


NUMERIC_FIELDS = frozenset({
    "danceability",
    "energy",
    "loudness",
    "speechiness",
    "acousticness",
    "instrumentalness",
    "liveness",
    "valence",
    "tempo",
    "duration_min",
    "views",
    "likes",
    "comments",
    "stream",
    "energy_liveness",
})

INT_FIELDS = frozenset({"likes", "comments", "stream"})

BOOL_FIELDS = frozenset({"licensed", "official_video"})

TEXT_FIELDS = frozenset({
    "artist",
    "track",
    "album",
    "album_type",
    "title",
    "channel",
    "most_played_on",
})

# Declaration order, used for schemas and column output.
FIELD_ORDER = tuple(f.name for f in fields(Track))
ALL_FIELDS = frozenset(FIELD_ORDER)


@dataclass(frozen=True)
class GroupValue:
    key: object
    value: float | int | None


@dataclass(frozen=True)
class PlatformStreams:
    track: str
    streamed_on_youtube: int
    streamed_on_spotify: int


@dataclass(frozen=True)
class RankedTrack:
    record: Track
    rank: int


@dataclass(frozen=True)
class RatioTrack:
    record: Track
    ratio: float


@dataclass(frozen=True)
class CumulativeTrack:
    record: Track
    cumulative: float | int
