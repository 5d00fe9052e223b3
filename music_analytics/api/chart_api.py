# api/chart_api.py
from typing import Any, Optional
from fastapi import APIRouter, Depends #type: ignore

from music_analytics.api.deps import get_report_service
from music_analytics.common.logger import get_logger
from music_analytics.core.errors import ReportError
from music_analytics.services import params as P
from music_analytics.services.report_service import ReportService

logger = get_logger("Chart API")
router = APIRouter()


@router.get("/top-songs", summary="Top songs by region")
async def get_top_songs(
    region: Optional[str] = None,
    days: Optional[str] = None,
    limit: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
) -> Any:
    """
    Most played songs among listeners of one country.
    URL: /api/charts/top-songs?region=GT&days=7&limit=10
    """
    params = P.top_songs_params(region, days, limit)
    try:
        return await service.top_songs(params)
    except ReportError:
        raise
    except Exception as e:
        logger.error(f"Error building top songs chart for {params.region}: {e}")
        raise ReportError.execution(str(e)) from e
