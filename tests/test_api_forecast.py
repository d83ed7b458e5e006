"""同日預報 API 測試"""

import pytest
from fastapi.testclient import TestClient

from powercast.api.v1.forecast import get_forecast_service
from powercast.exceptions import DataProviderError
from powercast.main import app
from powercast.services.forecast import ForecastService


class StubPowerClient:
    """回傳模擬資料的 NASA POWER 客戶端"""

    def __init__(self, raw, error=None):
        self.raw = raw
        self.error = error
        self.requests = []

    async def fetch_daily(self, lat, lon, start, end):
        self.requests.append((lat, lon, start, end))
        if self.error:
            raise self.error
        return self.raw


class StubResolver:
    def __init__(self, value):
        self.value = value

    async def resolve(self, lat, lon):
        return self.value


def make_service(raw, error=None):
    return ForecastService(
        client=StubPowerClient(raw, error),
        elevation=StubResolver(2558.0),
        names=StubResolver("Cochabamba, Bolivia"),
        history_years=30,
    )


client = TestClient(app)


@pytest.fixture(autouse=True)
def override_service(raw_series):
    """每次測試使用模擬的預報服務"""
    service = make_service(raw_series)
    app.dependency_overrides[get_forecast_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


class TestForecastAPI:
    """預報 API 測試類別"""

    def test_forecast(self, override_service):
        """測試取得同日預報"""
        response = client.get("/api/v1/forecast", params={
            "lat": -17.3935, "lon": -66.157, "date": "1004",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True

        result = data["data"]
        assert result["location_name"] == "Cochabamba, Bolivia"
        assert result["date"] == "1004"
        assert result["month_name"] == "October"
        assert result["elevation"]["elevation"] == 2558.0
        assert result["metadata"]["years_analyzed"] == 30
        assert result["analysis"]["prediction"]["calibrated"] is True
        assert result["analysis"]["prediction"]["temp_max"] == 27.8
        assert result["analysis"]["hourly_forecast"] is None
        assert set(result["analysis"]["risk_scores"]) == {"frost", "storm", "heat_stress"}

        lat, lon, start, end = override_service.client.requests[0]
        assert start.endswith("0101")
        assert end.endswith("1231")

    def test_forecast_hourly(self):
        """測試逐時預報"""
        response = client.get("/api/v1/forecast", params={
            "lat": -17.3935, "lon": -66.157, "date": "1004", "hour": 15,
        })

        assert response.status_code == 200
        hourly = response.json()["data"]["analysis"]["hourly_forecast"]
        assert hourly["hour"] == 15
        assert hourly["range"]["min"] <= hourly["expected_temp"] <= hourly["range"]["max"]

    @pytest.mark.parametrize("date", ["104", "10-4", "abcd", "1304", "1000", "00401"])
    def test_invalid_date(self, date):
        """測試日期格式錯誤"""
        response = client.get("/api/v1/forecast", params={
            "lat": -17.3935, "lon": -66.157, "date": date,
        })

        assert response.status_code == 400

    def test_invalid_hour(self):
        """測試小時超出範圍"""
        response = client.get("/api/v1/forecast", params={
            "lat": -17.3935, "lon": -66.157, "date": "1004", "hour": 25,
        })

        assert response.status_code == 422

    def test_invalid_latitude(self):
        """測試緯度超出範圍"""
        response = client.get("/api/v1/forecast", params={
            "lat": 95, "lon": -66.157, "date": "1004",
        })

        assert response.status_code == 422

    def test_missing_params(self):
        """測試缺少必要參數"""
        response = client.get("/api/v1/forecast", params={"lat": -17.3935})

        assert response.status_code == 422

    def test_data_provider_error(self, raw_series):
        """測試歷史資料無法取得時回傳 502"""
        service = make_service(raw_series, DataProviderError("unavailable", attempts=4, status_code=503))
        app.dependency_overrides[get_forecast_service] = lambda: service

        response = client.get("/api/v1/forecast", params={
            "lat": -17.3935, "lon": -66.157, "date": "1004",
        })

        assert response.status_code == 502


def test_health_check():
    """測試健康檢查"""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_index():
    """測試端點說明"""
    response = client.get("/")

    assert response.status_code == 200
    assert "/api/v1/forecast" in response.json()["endpoints"]
