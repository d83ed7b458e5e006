# powercast/main.py
"""FastAPI 應用程式入口"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from powercast import __version__
from powercast.api.v1 import forecast
from powercast.config import configure_logging, settings
from powercast.services.forecast import ForecastService
from powercast.services.location import (
    CoordinateCache,
    ElevationResolver,
    LocationNameResolver,
)


def create_forecast_service() -> ForecastService:
    """建立預報服務，高程與地名快取在整個程序內共用"""
    return ForecastService(
        elevation=ElevationResolver(CoordinateCache()),
        names=LocationNameResolver(CoordinateCache()),
    )


configure_logging()

app = FastAPI(
    title=settings.app_name,
    description="以 NASA POWER 歷史資料推估同日氣候機率與風險",
    version=__version__,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.state.forecast_service = create_forecast_service()


@app.get("/health")
async def health_check():
    """健康檢查端點"""
    return {"status": "ok", "version": __version__}


@app.get("/")
async def index():
    """端點說明"""
    return {
        "message": "powercast - 同日歷史氣候預報",
        "endpoints": {
            "/api/v1/forecast": "GET - 指定日期的極端氣候機率與風險",
            "params": "lat, lon, date (MMDD), hour (0-23, 可選)",
        },
        "examples": {
            "daily": "/api/v1/forecast?lat=-17.3935&lon=-66.157&date=1004",
            "hourly": "/api/v1/forecast?lat=-17.3935&lon=-66.157&date=1004&hour=15",
        },
    }


# 註冊 API 路由
app.include_router(
    forecast.router,
    prefix="/api/v1/forecast",
    tags=["forecast"]
)
