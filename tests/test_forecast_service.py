"""同日預報服務測試"""

import asyncio
from unittest.mock import patch

import pytest

from powercast.analytics.pipeline import run_forecast
from powercast.services.forecast import ForecastService


class StubPowerClient:
    def __init__(self, raw):
        self.raw = raw
        self.requests = []

    async def fetch_daily(self, lat, lon, start, end):
        self.requests.append((lat, lon, start, end))
        return self.raw


class StubResolver:
    def __init__(self, value):
        self.value = value

    async def resolve(self, lat, lon):
        return self.value


@pytest.fixture
def service(raw_series):
    return ForecastService(
        client=StubPowerClient(raw_series),
        elevation=StubResolver(2558.0),
        names=StubResolver("Cochabamba, Bolivia"),
        history_years=30,
    )


class TestForecastService:
    """測試預報服務串接"""

    @pytest.mark.asyncio
    async def test_forecast(self, service):
        """測試組成預報結果"""
        report = await service.forecast(-17.3935, -66.157, 10, 4, current_year=2026)

        assert report.period == "1996-2026"
        assert report.month_name == "October"
        assert report.location_name == "Cochabamba, Bolivia"
        assert report.elevation == 2558.0
        assert report.result.prediction.calibrated is True
        assert service.client.requests == [(-17.3935, -66.157, "19960101", "20261231")]

    @pytest.mark.asyncio
    async def test_analysis_runs_in_worker_thread(self, service):
        """測試分析流程交由工作執行緒執行"""
        with patch(
            "powercast.services.forecast.asyncio.to_thread",
            wraps=asyncio.to_thread,
        ) as mock_to_thread:
            report = await service.forecast(-17.3935, -66.157, 10, 4, hour=14, current_year=2026)

        mock_to_thread.assert_called_once()
        func, forecast_input = mock_to_thread.call_args.args
        assert func is run_forecast
        assert forecast_input.target_month == 10
        assert forecast_input.hour == 14
        assert report.result.hourly_forecast is not None
