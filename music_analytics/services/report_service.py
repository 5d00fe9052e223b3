# services/report_service.py
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from bson import ObjectId #type: ignore

from music_analytics.common.logger import get_logger
from music_analytics.common.schemas.report_schemas import (
    GenreDemographicsParams,
    RoyaltyParams,
    TopFansParams,
    TopSongsParams,
    ZombieParams,
)
from music_analytics.core.database import QueryExecutor
from music_analytics.services import report_builder as builder

logger = get_logger("Report Service")

Row = Dict[str, Any]


def round2(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_percentage(part: int, total: int) -> str:
    if not total:
        return "0.00%"
    return f"{round2(part / total * 100):.2f}%"


def format_amount(value: float) -> str:
    # 0.01 -> "0.01", 2.0 -> "2"
    text = format(Decimal(str(value)).normalize(), "f")
    return f"${text}"


def to_json_safe(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(v) for v in value]
    return value


def with_rank(rows: List[Row]) -> List[Row]:
    return [{"rank": index + 1, **row} for index, row in enumerate(rows)]


# Result shaping

def shape_royalties(rows: List[Row], params: RoyaltyParams) -> Row:
    if params.per_minute:
        rate_applied = f"{format_amount(params.rate_per_minute)}/min"
    else:
        rate_applied = f"{format_amount(params.rate_per_stream)}/stream"

    data = []
    for row in rows:
        if params.per_minute:
            earnings = row.get("total_minutes", 0) * params.rate_per_minute
        else:
            earnings = row.get("total_streams", 0) * params.rate_per_stream
        data.append({**row, "rate_applied": rate_applied, "earnings_usd": round2(earnings)})

    total_earnings = sum(item["earnings_usd"] for item in data)
    total_streams = sum(item.get("total_streams", 0) for item in data)
    total_hours = sum(item.get("total_hours", 0) for item in data)

    return {
        "success": True,
        "period": f"last_{params.days}_days",
        "rate_per_stream": format_amount(params.rate_per_stream),
        "generated_at": params.now.isoformat(),
        "summary": {
            "total_artists": len(data),
            "total_streams": total_streams,
            "total_hours": round2(total_hours),
            "total_earnings_usd": round2(total_earnings),
        },
        "data": to_json_safe(data),
    }


def shape_top_songs(rows: List[Row], params: TopSongsParams) -> Row:
    songs = [
        {
            "song_id": row.get("_id"),
            "song_title": row.get("song_title"),
            "artist": row.get("artist"),
            "play_count": row.get("play_count", 0),
        }
        for row in rows
    ]
    return {
        "success": True,
        "region": params.region,
        "period_days": params.days,
        "generated_at": params.now.isoformat(),
        "data": to_json_safe(with_rank(songs)),
    }


def shape_zombies(rows: List[Row], params: ZombieParams) -> Row:
    return {
        "success": True,
        "inactive_days_threshold": params.days,
        "subscription_filter": params.subscription,
        "total_at_risk": len(rows),
        "generated_at": params.now.isoformat(),
        "data": to_json_safe(rows),
    }


def shape_genre_demographics(rows: List[Row], params: GenreDemographicsParams) -> Row:
    total_streams = sum(row.get("stream_count", 0) for row in rows)
    data = [
        {**row, "percentage": format_percentage(row.get("stream_count", 0), total_streams)}
        for row in rows
    ]
    return {
        "success": True,
        "genre": params.genre,
        "total_streams_analyzed": total_streams,
        "generated_at": params.now.isoformat(),
        "data": to_json_safe(data),
    }


def shape_top_fans(rows: List[Row], params: TopFansParams) -> Row:
    return {
        "success": True,
        "artist": params.artist,
        "generated_at": params.now.isoformat(),
        "data": to_json_safe(with_rank(rows)),
    }


class ReportService:
    """
    Build the plan, run it through the injected executor, shape the rows.
    Store errors propagate to the caller.
    """

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    async def royalties(self, params: RoyaltyParams) -> Row:
        rows = await self.executor.execute(builder.build_royalty_plan(params))
        logger.info(f"Royalties: {len(rows)} artists in last {params.days} days")
        return shape_royalties(rows, params)

    async def top_songs(self, params: TopSongsParams) -> Row:
        rows = await self.executor.execute(builder.build_top_songs_plan(params))
        logger.info(f"Top songs {params.region}: {len(rows)} songs")
        return shape_top_songs(rows, params)

    async def zombies(self, params: ZombieParams) -> Row:
        rows = await self.executor.execute(builder.build_zombie_plan(params))
        logger.info(f"Zombie users ({params.subscription}): {len(rows)} at risk")
        return shape_zombies(rows, params)

    async def genre_demographics(self, params: GenreDemographicsParams) -> Row:
        rows = await self.executor.execute(builder.build_genre_demographics_plan(params))
        logger.info(f"Demographics '{params.genre}': {len(rows)} buckets")
        return shape_genre_demographics(rows, params)

    async def top_fans(self, params: TopFansParams) -> Row:
        rows = await self.executor.execute(builder.build_top_fans_plan(params))
        logger.info(f"Top fans '{params.artist}': {len(rows)} users")
        return shape_top_fans(rows, params)
