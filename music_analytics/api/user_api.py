# api/user_api.py
from typing import Any, Optional
from fastapi import APIRouter, Depends #type: ignore

from music_analytics.api.deps import get_report_service
from music_analytics.common.logger import get_logger
from music_analytics.core.errors import ReportError
from music_analytics.services import params as P
from music_analytics.services.report_service import ReportService

logger = get_logger("User API")
router = APIRouter()


@router.get("/zombies", summary="Inactive subscribers (churn risk)")
async def get_zombie_users(
    days: Optional[str] = None,
    subscription: Optional[str] = None,
    country: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
) -> Any:
    """
    Users with no streams in the last `days` days.
    URL: /api/users/zombies?days=30&subscription=Premium&country=GT
    subscription=All disables the tier filter.
    """
    params = P.zombie_params(days, subscription, country)
    try:
        return await service.zombies(params)
    except ReportError:
        raise
    except Exception as e:
        logger.error(f"Error listing zombie users: {e}")
        raise ReportError.execution(str(e)) from e


@router.get("/top-fans", summary="Top fans of an artist")
async def get_top_fans(
    artist: Optional[str] = None,
    limit: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
) -> Any:
    """
    Listeners ranked by distinct songs played, then by total plays.
    URL: /api/users/top-fans?artist=Bad Bunny&limit=5
    """
    params = P.top_fans_params(artist, limit)
    try:
        return await service.top_fans(params)
    except ReportError:
        raise
    except Exception as e:
        logger.error(f"Error ranking fans of '{params.artist}': {e}")
        raise ReportError.execution(str(e)) from e
