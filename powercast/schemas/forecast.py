# powercast/schemas/forecast.py
"""預報 API Pydantic Schema 定義"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class LocationInfo(BaseModel):
    """查詢位置"""

    lat: float = Field(..., ge=-90, le=90, description="緯度")
    lon: float = Field(..., ge=-180, le=180, description="經度")


class PercentilesSchema(BaseModel):
    """百分位數"""

    p10: float
    p25: float
    p50: float
    p75: float
    p90: float


class ConfidenceIntervalSchema(BaseModel):
    """95% 信賴區間"""

    lower: float
    upper: float
    margin: float


class StatisticsSchema(BaseModel):
    """敘述統計"""

    mean: float = Field(..., description="平均值")
    median: float = Field(..., description="中位數")
    std_dev: float = Field(..., ge=0, description="母體標準差")
    min: float
    max: float
    count: int = Field(..., ge=0, description="有效年數")
    percentiles: PercentilesSchema
    ci95: ConfidenceIntervalSchema


class TrendSchema(BaseModel):
    """加權趨勢"""

    slope: float = Field(..., description="每年變化量")
    intercept: float
    r_squared: float = Field(..., ge=0, le=1, description="加權 R²")
    confidence: str = Field(..., description="信心等級 (high/medium/low)")
    method: str


class PredictionSchema(BaseModel):
    """點預測"""

    temp_max: float = Field(..., description="預測最高溫 (°C)")
    temp_min: float = Field(..., description="預測最低溫 (°C)")
    wind_max: float = Field(..., description="預測最大風速 (m/s)")
    humidity: float = Field(..., ge=0, le=100, description="預測濕度 (%)")
    precipitation: float = Field(..., ge=0, description="預測降水量 (mm)")
    year: int
    confidence: dict[str, str]
    trend: dict[str, TrendSchema]
    calibrated: bool = Field(..., description="溫度是否由校正表覆寫")
    calibration_name: Optional[str] = None
    season: str


class ThresholdsSchema(BaseModel):
    """適應性門檻"""

    very_hot: float
    very_cold: float
    very_windy: float
    very_humid: float
    heavy_rain: float


class ConditionSchema(BaseModel):
    """極端條件機率"""

    probability: float = Field(..., ge=0, le=100, description="機率 (0-100)")
    threshold: float
    years_exceeded: int
    total_years: int
    unit: str


class ConditionsSchema(BaseModel):
    """五種極端條件"""

    very_hot: ConditionSchema
    very_cold: ConditionSchema
    very_windy: ConditionSchema
    very_humid: ConditionSchema
    heavy_rain: ConditionSchema


class RiskScoreSchema(BaseModel):
    """風險分數"""

    risk_type: str
    score: float = Field(..., ge=0, le=100)
    level: str = Field(..., description="風險等級 (high/medium/low)")
    recommendations: list[str]
    description: str


class RiskScoresSchema(BaseModel):
    """複合風險"""

    frost: RiskScoreSchema
    storm: RiskScoreSchema
    heat_stress: RiskScoreSchema


class TemperatureRangeSchema(BaseModel):
    min: float
    max: float


class HistoricalHourlySchema(BaseModel):
    """歷史百分位數推估的同時刻溫度"""

    median: float
    p25: float
    p75: float
    p90: float


class HourlyForecastSchema(BaseModel):
    """逐時預報"""

    hour: int = Field(..., ge=0, le=23)
    expected_temp: float
    range: TemperatureRangeSchema
    rain_probability: float = Field(..., ge=0, le=100)
    rain_note: str
    historical: HistoricalHourlySchema


class ValidationSchema(BaseModel):
    """合理性檢查"""

    is_valid: bool
    errors: list[str]
    warnings: list[str]
    confidence: int = Field(..., ge=0, le=100)


class AnalysisSchema(BaseModel):
    """分析結果"""

    prediction: PredictionSchema
    statistics: dict[str, StatisticsSchema]
    trends: dict[str, TrendSchema]
    thresholds: ThresholdsSchema
    conditions: ConditionsSchema
    risk_scores: RiskScoresSchema
    hourly_forecast: Optional[HourlyForecastSchema] = None
    validation: Optional[ValidationSchema] = None


class ElevationSchema(BaseModel):
    """高程資訊（僅供參考，不參與計算）"""

    elevation: float
    correction: float = 0
    unit: str = "m"
    note: str


class ForecastMetadata(BaseModel):
    years_analyzed: int
    confidence_level: str
    validation: Optional[dict] = None


class ForecastResponse(BaseModel):
    """同日預報回應"""

    location: LocationInfo
    location_name: str
    date: str = Field(..., pattern=r"^\d{4}$", description="日期 (MMDD)")
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    month_name: str
    period: str = Field(..., description="分析期間，例如 1996-2026")
    data_source: str
    elevation: ElevationSchema
    analysis: AnalysisSchema
    metadata: ForecastMetadata

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "location": {"lat": -17.3935, "lon": -66.157},
                "location_name": "Cochabamba, Bolivia",
                "date": "1004",
                "month": 10,
                "day": 4,
                "month_name": "October",
                "period": "1996-2026",
                "data_source": "NASA POWER API (Daily)",
            }
        }
    )


class ApiResponse(BaseModel, Generic[T]):
    """API 回應包裝"""

    success: bool = Field(True, description="請求是否成功")
    data: Optional[T] = Field(None, description="回應資料")
    error: Optional[str] = Field(None, description="錯誤訊息")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "data": {},
                "error": None
            }
        }
