# services/params.py
"""
Turn raw query-string values into typed, defaulted report parameters.

Numbers are read from their leading numeric prefix, so `?period=30d` means
30 days. Missing, unparseable or zero values fall back to the default.
Only an upper cap is applied; lower bounds are left to the store.
"""
import re
from datetime import datetime, timezone
from typing import Optional

from music_analytics import config as cfg
from music_analytics.common import constants as const
from music_analytics.common.schemas.report_schemas import (
    GenreDemographicsParams,
    RoyaltyParams,
    TopFansParams,
    TopSongsParams,
    ZombieParams,
)
from music_analytics.core.errors import ReportError

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    m = _INT_PREFIX.match(str(raw))
    if not m:
        return default
    return int(m.group(1)) or default


def parse_float(raw: Optional[str], default: float) -> float:
    if raw is None:
        return default
    m = _FLOAT_PREFIX.match(str(raw))
    if not m:
        return default
    return float(m.group(1)) or default


def cap(value: int, upper: int) -> int:
    return min(value, upper)


def require(raw: Optional[str], name: str) -> str:
    if raw is None or not raw.strip():
        raise ReportError.validation(f"The '{name}' parameter is required")
    return raw.strip()


def royalty_params(period: Optional[str], days: Optional[str], rate: Optional[str],
                   rate_per_minute: Optional[str], now: Optional[datetime] = None) -> RoyaltyParams:
    window = period if period is not None else days
    return RoyaltyParams(
        now=now or utc_now(),
        days=cap(parse_int(window, const.DEFAULT_WINDOW_DAYS), cfg.MAX_WINDOW_DAYS),
        rate_per_stream=parse_float(rate, const.DEFAULT_RATE_PER_STREAM),
        rate_per_minute=parse_float(rate_per_minute, const.DEFAULT_RATE_PER_MINUTE),
    )


def top_songs_params(region: Optional[str], days: Optional[str], limit: Optional[str],
                     now: Optional[datetime] = None) -> TopSongsParams:
    return TopSongsParams(
        now=now or utc_now(),
        region=require(region, "region").upper(),
        days=cap(parse_int(days, const.DEFAULT_CHART_DAYS), cfg.MAX_WINDOW_DAYS),
        limit=cap(parse_int(limit, const.DEFAULT_CHART_LIMIT), cfg.MAX_LIMIT),
    )


def zombie_params(days: Optional[str], subscription: Optional[str], country: Optional[str],
                  now: Optional[datetime] = None) -> ZombieParams:
    return ZombieParams(
        now=now or utc_now(),
        days=cap(parse_int(days, const.DEFAULT_WINDOW_DAYS), cfg.MAX_WINDOW_DAYS),
        subscription=subscription or const.DEFAULT_SUBSCRIPTION,
        country=country.upper() if country else None,
    )


def genre_demographics_params(genre: Optional[str], now: Optional[datetime] = None) -> GenreDemographicsParams:
    return GenreDemographicsParams(now=now or utc_now(), genre=require(genre, "genre"))


def top_fans_params(artist: Optional[str], limit: Optional[str], now: Optional[datetime] = None) -> TopFansParams:
    return TopFansParams(
        now=now or utc_now(),
        artist=require(artist, "artist"),
        limit=cap(parse_int(limit, const.DEFAULT_TOP_FANS_LIMIT), cfg.MAX_LIMIT),
    )
