# services/report_builder.py
"""
Aggregation plans for the five analytics reports.

Every builder is a pure function of its normalized parameters, so plans can
be inspected in tests without a running MongoDB.
"""
import re

from music_analytics import config as cfg
from music_analytics.common import constants as const
from music_analytics.common.schemas.report_schemas import (
    GenreDemographicsParams,
    RoyaltyParams,
    TopFansParams,
    TopSongsParams,
    ZombieParams,
)
from music_analytics.core import pipeline as p
from music_analytics.core.pipeline import AggregationPlan


def _contains(text: str) -> dict:
    """Case-insensitive substring match on a literal string."""
    return {"$regex": re.escape(text), "$options": "i"}


def build_royalty_plan(params: RoyaltyParams) -> AggregationPlan:
    return AggregationPlan(cfg.COLLECTION_STREAMS, (
        p.match({"date": {"$gte": params.date_from}}),
        p.lookup(cfg.COLLECTION_ARTISTS, "artist_id", "_id", "artist"),
        p.unwind("artist"),
        p.group(
            "$artist_id",
            artist={"$first": "$artist.name"},
            total_seconds={"$sum": "$seconds_played"},
            total_streams={"$sum": 1},
        ),
        p.project({
            "_id": 0,
            "artist_id": "$_id",
            "artist": 1,
            "total_seconds": 1,
            "total_minutes": {"$round": [{"$divide": ["$total_seconds", 60]}, 2]},
            "total_hours": {"$round": [{"$divide": ["$total_seconds", 3600]}, 2]},
            "total_streams": 1,
        }),
        p.sort(("total_seconds", -1)),
    ))


def build_top_songs_plan(params: TopSongsParams) -> AggregationPlan:
    return AggregationPlan(cfg.COLLECTION_STREAMS, (
        p.match({"date": {"$gte": params.date_from}}),
        p.lookup(cfg.COLLECTION_USERS, "user_id", "_id", "user"),
        p.unwind("user"),
        p.match({"user.country": params.region.upper()}),
        p.lookup(cfg.COLLECTION_SONGS, "song_id", "_id", "song"),
        p.unwind("song"),
        p.group(
            "$song_id",
            song_title={"$first": "$song.title"},
            artist={"$first": "$song.artist_name"},
            play_count={"$sum": 1},
        ),
        p.sort(("play_count", -1)),
        p.limit(params.limit),
    ))


def build_zombie_plan(params: ZombieParams) -> AggregationPlan:
    user_filter = {}
    if params.subscription != const.ALL_SUBSCRIPTIONS:
        user_filter["subscription"] = params.subscription
    if params.country:
        user_filter["country"] = params.country.upper()

    recent_streams = [
        {"$match": {"$expr": {"$and": [
            {"$eq": ["$user_id", "$$userId"]},
            {"$gte": ["$date", params.date_from]},
        ]}}},
        # Existence check only
        {"$limit": 1},
    ]

    return AggregationPlan(cfg.COLLECTION_USERS, (
        p.match(user_filter),
        p.correlated_lookup(cfg.COLLECTION_STREAMS, {"userId": "$_id"}, recent_streams, "recent_streams"),
        p.match({"recent_streams": {"$size": 0}}),
        p.project(dict(const.ZOMBIE_USER_PROJECTION)),
    ))


def _age_range_label() -> dict:
    branches = [
        {"case": {"$eq": ["$_id", lower]}, "then": label}
        for lower, label in const.AGE_RANGE_LABELS.items()
    ]
    return {"$switch": {"branches": branches, "default": const.UNKNOWN_AGE_RANGE}}


def build_genre_demographics_plan(params: GenreDemographicsParams) -> AggregationPlan:
    return AggregationPlan(cfg.COLLECTION_STREAMS, (
        p.lookup(cfg.COLLECTION_SONGS, "song_id", "_id", "song"),
        p.unwind("song"),
        p.match({"song.genre": _contains(params.genre)}),
        p.lookup(cfg.COLLECTION_USERS, "user_id", "_id", "user"),
        p.unwind("user"),
        p.add_fields({
            "age": {"$floor": {"$divide": [
                {"$subtract": [params.now, "$user.birth_date"]},
                const.MILLISECONDS_PER_YEAR,
            ]}},
        }),
        p.bucket(
            "$age",
            const.AGE_BUCKET_BOUNDARIES,
            const.UNKNOWN_AGE_RANGE,
            {"count": {"$sum": 1}, "users": {"$addToSet": "$user_id"}},
        ),
        p.project({
            "_id": 0,
            "age_range": _age_range_label(),
            "stream_count": "$count",
            "unique_users": {"$size": "$users"},
        }),
    ))


def build_top_fans_plan(params: TopFansParams) -> AggregationPlan:
    return AggregationPlan(cfg.COLLECTION_STREAMS, (
        p.lookup(cfg.COLLECTION_SONGS, "song_id", "_id", "song"),
        p.unwind("song"),
        p.match({"song.artist_name": _contains(params.artist)}),
        p.group(
            "$user_id",
            unique_songs={"$addToSet": "$song_id"},
            total_plays={"$sum": 1},
        ),
        p.lookup(cfg.COLLECTION_USERS, "_id", "_id", "user"),
        p.unwind("user"),
        p.project({
            "_id": 0,
            "user_id": "$_id",
            "username": "$user.username",
            "email": "$user.email",
            "unique_songs_count": {"$size": "$unique_songs"},
            "total_plays": 1,
        }),
        p.sort(("unique_songs_count", -1), ("total_plays", -1)),
        p.limit(params.limit),
    ))
