from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel, ConfigDict #type: ignore


class ReportParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Request time, evaluated once and shared by the plan and `generated_at`
    now: datetime


class WindowedParams(ReportParams):
    days: int

    @property
    def date_from(self) -> datetime:
        return self.now - timedelta(days=self.days)


class RoyaltyParams(WindowedParams):
    rate_per_stream: float
    rate_per_minute: float = 0.0

    @property
    def per_minute(self) -> bool:
        return self.rate_per_minute > 0


class TopSongsParams(WindowedParams):
    region: str
    limit: int


class ZombieParams(WindowedParams):
    subscription: str
    country: Optional[str] = None


class GenreDemographicsParams(ReportParams):
    genre: str


class TopFansParams(ReportParams):
    artist: str
    limit: int
