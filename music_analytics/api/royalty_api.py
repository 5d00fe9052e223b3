# api/royalty_api.py
from typing import Any, Optional
from fastapi import APIRouter, Depends #type: ignore

from music_analytics.api.deps import get_report_service
from music_analytics.common.logger import get_logger
from music_analytics.core.errors import ReportError
from music_analytics.services import params as P
from music_analytics.services.report_service import ReportService

logger = get_logger("Royalty API")
router = APIRouter()


@router.get("", summary="Royalty report per artist")
async def get_royalties(
    period: Optional[str] = None,
    days: Optional[str] = None,
    rate: Optional[str] = None,
    rate_per_minute: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
) -> Any:
    """
    Play time and earnings per artist over a trailing window.
    URL: /api/royalties?period=30d&rate=0.01&rate_per_minute=0
    Earnings use rate_per_minute when it is positive, otherwise rate per stream.
    """
    params = P.royalty_params(period, days, rate, rate_per_minute)
    try:
        return await service.royalties(params)
    except ReportError:
        raise
    except Exception as e:
        logger.error(f"Error building royalty report: {e}")
        raise ReportError.execution(str(e)) from e
