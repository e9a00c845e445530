"""Analytical operations over a sequence of track records.

Every operation takes the records as its first argument and returns a newly
built list; the input sequence and its records are never modified. Field
names are validated before any record is read, so a bad field fails with
InvalidFieldError even on empty input.

Null handling: nulls count as zero in sums, and are skipped by averages,
min/max, counts, rankings and threshold comparisons.
"""

import operator
from collections.abc import Callable, Hashable, Sequence
from itertools import groupby
from operator import attrgetter

import numpy as np

from trackstats.errors import InvalidFieldError
from trackstats.models import (
    ALL_FIELDS,
    NUMERIC_FIELDS,
    CumulativeTrack,
    GroupValue,
    PlatformStreams,
    RankedTrack,
    RatioTrack,
    Track,
)

Predicate = Callable[[Track], bool]

COMPARATORS: dict[str, Callable[[object, object], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
}

AGGREGATES = ("avg", "sum", "max", "min")

YOUTUBE = "youtube"
SPOTIFY = "spotify"


def _check_numeric(field: str) -> None:
    if field not in NUMERIC_FIELDS:
        raise InvalidFieldError(field, NUMERIC_FIELDS)


def _check_field(field: str) -> None:
    if field not in ALL_FIELDS:
        raise InvalidFieldError(field, ALL_FIELDS)


def _comparator(symbol: str) -> Callable[[object, object], bool]:
    try:
        return COMPARATORS[symbol]
    except KeyError:
        raise ValueError(
            f"Unknown comparator {symbol!r}; expected one of: {', '.join(COMPARATORS)}"
        ) from None


def _fold(value: object) -> object:
    # Text matches case-insensitively.
    if isinstance(value, str):
        return value.casefold()
    return value


def _or_zero(value: float | int | None) -> float | int:
    return 0 if value is None else value


def _non_null(records: Sequence[Track], field: str) -> list:
    return [v for v in (getattr(r, field) for r in records) if v is not None]


def _group(tracks: Sequence[Track], key: str) -> dict[Hashable, list[Track]]:
    """Bucket records by a field, keeping first-occurrence order of keys."""
    groups: dict[Hashable, list[Track]] = {}
    for track in tracks:
        groups.setdefault(getattr(track, key), []).append(track)
    return groups


def _distinct(tracks: Sequence[Track]) -> list[Track]:
    return list(dict.fromkeys(tracks))


def _key_order(key: Hashable) -> tuple:
    return (key is None, key)


def where(field: str, comparator: str, value: object) -> Predicate:
    """Build a record predicate comparing ``field`` against ``value``.

    Null field values never satisfy the predicate.
    """
    _check_field(field)
    compare = _comparator(comparator)
    target = _fold(value)

    def predicate(track: Track) -> bool:
        current = getattr(track, field)
        if current is None:
            return False
        return compare(_fold(current), target)

    return predicate


def filter_by_threshold(
    tracks: Sequence[Track], field: str, comparator: str, value: float
) -> list[Track]:
    """Records whose numeric ``field`` satisfies ``comparator value``."""
    _check_numeric(field)
    predicate = where(field, comparator, value)
    return [t for t in tracks if predicate(t)]


def filter_equals(tracks: Sequence[Track], field: str, value: object) -> list[Track]:
    _check_field(field)
    target = _fold(value)
    return [t for t in tracks if _fold(getattr(t, field)) == target]


def distinct_pairs(tracks: Sequence[Track], field_a: str, field_b: str) -> list[tuple]:
    """Unique ``(field_a, field_b)`` values in order of first occurrence."""
    _check_field(field_a)
    _check_field(field_b)
    return list(dict.fromkeys((getattr(t, field_a), getattr(t, field_b)) for t in tracks))


def conditional_sum(
    tracks: Sequence[Track], field: str, predicate: Predicate | None = None
) -> float | int:
    _check_numeric(field)
    return sum(
        _or_zero(getattr(t, field))
        for t in tracks
        if predicate is None or predicate(t)
    )


def group_count(tracks: Sequence[Track], group_key: str, count_field: str) -> list[GroupValue]:
    """Non-null ``count_field`` occurrences per group, largest first.

    Equal counts are ordered by group key ascending.
    """
    _check_field(group_key)
    _check_field(count_field)
    rows = [
        GroupValue(key, len(_non_null(members, count_field)))
        for key, members in _group(tracks, group_key).items()
    ]
    rows.sort(key=lambda r: (-r.value, _key_order(r.key)))
    return rows


def _aggregate(agg_fn: str, values: list) -> float | int | None:
    if agg_fn == "sum":
        return sum(values)
    if not values:
        return None
    if agg_fn == "avg":
        return float(np.mean(values))
    if agg_fn == "max":
        return max(values)
    return min(values)


def group_aggregate(
    tracks: Sequence[Track], group_key: str, agg_field: str, agg_fn: str
) -> list[GroupValue]:
    """Apply avg/sum/max/min to ``agg_field`` per group.

    One row per group, in order of the group's first occurrence. A group whose
    values are all null aggregates to None, except ``sum`` which gives 0.
    """
    _check_field(group_key)
    _check_numeric(agg_field)
    if agg_fn not in AGGREGATES:
        raise ValueError(f"Unknown aggregate {agg_fn!r}; expected one of: {', '.join(AGGREGATES)}")
    return [
        GroupValue(key, _aggregate(agg_fn, _non_null(members, agg_field)))
        for key, members in _group(tracks, group_key).items()
    ]


def top_n(
    tracks: Sequence[Track], sort_field: str, n: int, descending: bool = True
) -> list[Track]:
    """First ``n`` records ordered by ``sort_field``.

    The sort is stable, so ties keep their input order. Records with a null
    sort value follow all others.
    """
    _check_numeric(sort_field)
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    present = [t for t in tracks if getattr(t, sort_field) is not None]
    missing = [t for t in tracks if getattr(t, sort_field) is None]
    ordered = sorted(present, key=attrgetter(sort_field), reverse=descending)
    return (ordered + missing)[:n]


def comparative_platform_streams(tracks: Sequence[Track]) -> list[PlatformStreams]:
    """Tracks streamed more on Spotify than on YouTube.

    Streams are summed per track name by the platform in ``most_played_on``.
    Tracks with no YouTube streams at all are left out.
    """
    totals: dict[str, dict[str, int]] = {}
    for track in tracks:
        sums = totals.setdefault(track.track, {YOUTUBE: 0, SPOTIFY: 0})
        platform = (track.most_played_on or "").casefold()
        if platform in sums:
            sums[platform] += _or_zero(track.stream)

    return [
        PlatformStreams(name, sums[YOUTUBE], sums[SPOTIFY])
        for name, sums in totals.items()
        if sums[SPOTIFY] > sums[YOUTUBE] and sums[YOUTUBE] != 0
    ]


def rank_within_group(
    tracks: Sequence[Track], group_key: str, metric: str, top_k: int
) -> list[RankedTrack]:
    """Dense-rank ``metric`` (highest first) within each group and keep ranks <= top_k.

    Equal values share a rank and the next distinct value takes the next
    integer, so ranks in a group run 1, 2, 3... without gaps. Rows come out
    group by group (first-occurrence order), then by rank, then input order.
    Records with a null metric are not ranked.
    """
    _check_field(group_key)
    _check_numeric(metric)

    ranked: list[RankedTrack] = []
    for members in _group(tracks, group_key).values():
        scored = sorted(
            (t for t in members if getattr(t, metric) is not None),
            key=attrgetter(metric),
            reverse=True,
        )
        rank = 0
        previous = None
        for track in scored:
            value = getattr(track, metric)
            if rank == 0 or value != previous:
                rank += 1
                previous = value
            if rank > top_k:
                break
            ranked.append(RankedTrack(track, rank))
    return ranked


def mean_of(tracks: Sequence[Track], field: str) -> float | None:
    """Arithmetic mean of the non-null values of ``field``, or None."""
    _check_numeric(field)
    values = _non_null(tracks, field)
    if not values:
        return None
    return float(np.mean(values))


def above_average(tracks: Sequence[Track], field: str) -> list[Track]:
    """Records whose ``field`` is strictly above its mean over the whole input."""
    mean = mean_of(tracks, field)
    if mean is None:
        return []
    return [
        t for t in tracks
        if getattr(t, field) is not None and getattr(t, field) > mean
    ]


def group_range(tracks: Sequence[Track], group_key: str, field: str) -> list[GroupValue]:
    """``max(field) - min(field)`` per group, widest range first."""
    _check_field(group_key)
    _check_numeric(field)
    rows = []
    for key, members in _group(tracks, group_key).items():
        values = _non_null(members, field)
        if values:
            rows.append(GroupValue(key, max(values) - min(values)))
    rows.sort(key=attrgetter("value"), reverse=True)
    return rows


def ratio_filter(
    tracks: Sequence[Track],
    numerator_field: str,
    denominator_field: str,
    min_ratio: float,
) -> list[RatioTrack]:
    """Distinct records whose ``numerator / denominator`` exceeds ``min_ratio``.

    Records with a zero, negative or null denominator are skipped rather
    than divided. Sorted by ratio ascending.
    """
    _check_numeric(numerator_field)
    _check_numeric(denominator_field)

    rows = []
    for track in _distinct(tracks):
        numerator = getattr(track, numerator_field)
        denominator = getattr(track, denominator_field)
        if numerator is None or denominator is None or denominator <= 0:
            continue
        ratio = numerator / denominator
        if ratio > min_ratio:
            rows.append(RatioTrack(track, ratio))
    rows.sort(key=attrgetter("ratio"))
    return rows


def cumulative_aggregate(
    tracks: Sequence[Track], order_field: str, agg_field: str
) -> list[CumulativeTrack]:
    """Running sum of ``agg_field`` over records ordered by ``order_field``.

    The sum runs over every input record, duplicates included; duplicate
    rows are only collapsed in the output. Rows sharing an order value share
    one cumulative value, which already includes every tied row. Null order
    values sort last and tie together.
    """
    _check_numeric(order_field)
    _check_numeric(agg_field)

    ordered = sorted(
        (t for t in tracks if getattr(t, order_field) is not None),
        key=attrgetter(order_field),
    )
    ordered += [t for t in tracks if getattr(t, order_field) is None]

    result: list[CumulativeTrack] = []
    running: float | int = 0
    for _, tied in groupby(ordered, key=attrgetter(order_field)):
        tied = list(tied)
        running += sum(_or_zero(getattr(t, agg_field)) for t in tied)
        result.extend(CumulativeTrack(t, running) for t in tied)
    return list(dict.fromkeys(result))
