"""同日預報服務

負責外部協作者與分析流程的串接：
1. 向 NASA POWER 取得近 N 年的每日資料（失敗時重試）
2. 查詢高程與地名（僅作為附帶資訊）
3. 執行分析流程並組成回應
"""

import asyncio
import calendar
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from powercast.analytics.pipeline import ForecastInput, ForecastResult, run_forecast
from powercast.analytics.prediction import Location
from powercast.analytics.validation import validation_summary
from powercast.config import settings
from powercast.services.location import (
    CoordinateCache,
    ElevationResolver,
    LocationNameResolver,
)
from powercast.services.nasa_power import NasaPowerClient

logger = logging.getLogger(__name__)


DATA_SOURCE = "NASA POWER API (Daily)"
ELEVATION_NOTE = "NASA POWER 資料已含查詢點的高程修正，不另做調整"


@dataclass(frozen=True)
class ForecastReport:
    """預報回應資料"""
    location: Location
    location_name: str
    elevation: float
    month: int
    day: int
    month_name: str
    start_year: int
    end_year: int
    data_source: str
    result: ForecastResult

    @property
    def period(self) -> str:
        return f"{self.start_year}-{self.end_year}"

    @property
    def years_analyzed(self) -> int:
        return self.end_year - self.start_year

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": {"lat": self.location.lat, "lon": self.location.lon},
            "location_name": self.location_name,
            "date": f"{self.month:02d}{self.day:02d}",
            "month": self.month,
            "day": self.day,
            "month_name": self.month_name,
            "period": self.period,
            "data_source": self.data_source,
            "elevation": {"elevation": self.elevation, "correction": 0, "unit": "m", "note": ELEVATION_NOTE},
            "analysis": self.result.to_dict(),
            "metadata": {
                "years_analyzed": self.years_analyzed,
                "confidence_level": "95%",
                "validation": (
                    validation_summary(self.result.validation) if self.result.validation else None
                ),
            },
        }


class ForecastService:
    """同日預報服務

    Attributes:
        client: NASA POWER 客戶端
        elevation: 高程查詢
        names: 地名查詢
        history_years: 分析的歷史年數
    """

    def __init__(
        self,
        client: NasaPowerClient | None = None,
        elevation: ElevationResolver | None = None,
        names: LocationNameResolver | None = None,
        history_years: int | None = None,
    ):
        self.client = client or NasaPowerClient()
        self.elevation = elevation or ElevationResolver(CoordinateCache())
        self.names = names or LocationNameResolver(CoordinateCache())
        self.history_years = history_years or settings.history_years

    async def forecast(
        self,
        lat: float,
        lon: float,
        month: int,
        day: int,
        hour: Optional[int] = None,
        current_year: Optional[int] = None,
    ) -> ForecastReport:
        """產生指定日期的同日預報

        Args:
            lat: 緯度
            lon: 經度
            month: 月份 (1-12)
            day: 日期 (1-31)
            hour: 小時 (0-23)，None 表示不需要逐時預報
            current_year: 目前年份（預設為系統年份）

        Returns:
            ForecastReport

        Raises:
            DataProviderError: 無法取得歷史資料時
        """
        current_year = current_year or datetime.now().year
        start_year = current_year - self.history_years

        logger.info(
            "Forecast request lat=%s lon=%s date=%02d%02d hour=%s",
            lat, lon, month, day, hour,
        )

        raw_series = await self.client.fetch_daily(
            lat, lon, f"{start_year}0101", f"{current_year}1231"
        )
        elevation, location_name = await asyncio.gather(
            self.elevation.resolve(lat, lon),
            self.names.resolve(lat, lon),
        )

        location = Location(lat=lat, lon=lon)
        # pandas 計算在工作執行緒執行，不阻塞事件迴圈
        result = await asyncio.to_thread(
            run_forecast,
            ForecastInput(
                raw_series=raw_series,
                target_month=month,
                target_day=day,
                current_year=current_year,
                location=location,
                hour=hour,
            ),
        )

        return ForecastReport(
            location=location,
            location_name=location_name,
            elevation=elevation,
            month=month,
            day=day,
            month_name=calendar.month_name[month],
            start_year=start_year,
            end_year=current_year,
            data_source=DATA_SOURCE,
            result=result,
        )
