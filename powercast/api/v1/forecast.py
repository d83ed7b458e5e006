# powercast/api/v1/forecast.py
"""同日預報 API 路由"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from powercast.exceptions import DataProviderError
from powercast.schemas.forecast import ApiResponse, ForecastResponse
from powercast.services.forecast import ForecastService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_forecast_service(request: Request) -> ForecastService:
    """取得應用程式共用的預報服務（FastAPI 依賴注入用）"""
    return request.app.state.forecast_service


def parse_month_day(value: str) -> tuple[int, int]:
    """解析 MMDD 日期

    Raises:
        HTTPException: 格式或數值不正確時 (400)
    """
    if len(value) != 4 or not value.isdigit():
        raise HTTPException(
            status_code=400,
            detail=f"date 必須為 MMDD 格式（例如 1004 代表 10 月 4 日），收到: {value}"
        )

    month, day = int(value[:2]), int(value[2:])
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise HTTPException(
            status_code=400,
            detail="日期無效：月份須為 01-12，日期須為 01-31"
        )

    return month, day


@router.get(
    "",
    response_model=ApiResponse[ForecastResponse],
    summary="同日氣候預報",
    description="以近 30 年同月同日的歷史資料，推估溫度、極端條件機率與複合風險",
)
async def get_forecast(
    lat: float = Query(..., description="緯度", ge=-90, le=90),
    lon: float = Query(..., description="經度", ge=-180, le=180),
    date: str = Query(..., description="日期 (MMDD)，例如 1004"),
    hour: Optional[int] = Query(None, description="逐時預報的小時 (0-23)", ge=0, le=23),
    service: ForecastService = Depends(get_forecast_service),
) -> ApiResponse[ForecastResponse]:
    """同日氣候預報

    Args:
        lat: 緯度
        lon: 經度
        date: 日期 (MMDD)
        hour: 小時（可選）
        service: 預報服務

    Returns:
        預報結果
    """
    month, day = parse_month_day(date)

    try:
        report = await service.forecast(lat, lon, month, day, hour=hour)
    except DataProviderError as e:
        logger.error("Historical data fetch failed: %s", e)
        raise HTTPException(
            status_code=502,
            detail=f"無法取得 NASA POWER 歷史資料: {e}"
        )

    return ApiResponse(
        success=True,
        data=ForecastResponse.model_validate(report.to_dict()),
    )
