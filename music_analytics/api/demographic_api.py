# api/demographic_api.py
from typing import Any, Optional
from fastapi import APIRouter, Depends #type: ignore

from music_analytics.api.deps import get_report_service
from music_analytics.common.logger import get_logger
from music_analytics.core.errors import ReportError
from music_analytics.services import params as P
from music_analytics.services.report_service import ReportService

logger = get_logger("Demographic API")
router = APIRouter()


@router.get("/genre", summary="Listener age distribution for a genre")
async def get_genre_demographics(
    genre: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
) -> Any:
    """
    URL: /api/demographics/genre?genre=Reggaeton
    """
    params = P.genre_demographics_params(genre)
    try:
        return await service.genre_demographics(params)
    except ReportError:
        raise
    except Exception as e:
        logger.error(f"Error building demographics for '{params.genre}': {e}")
        raise ReportError.execution(str(e)) from e
