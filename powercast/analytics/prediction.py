"""預測混合器

每個變數的點預測由三個訊號加權組成：
- 近況加權平均（tau = 3 年，偏重近年）
- 趨勢線在目前年份的數值（tau = 5 年的加權回歸）
- 最近 3 年資料的第 60 百分位數

預測值 = 0.40 * 加權平均 + 0.35 * 趨勢值 + 0.25 * 近年 P60

之後再套用：
- 校正覆寫：地點、月份落在校正表半徑內時，溫度直接以校正值取代
- 季節調整：溫度加上偏移（未校正時），濕度、降水乘以倍率
  濕度限制在 0-100，降水不小於 0；風速不做季節調整

溫度被校正覆寫時，濕度與降水仍會套用季節倍率。
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

import pandas as pd

from powercast.analytics.engine import percentile
from powercast.analytics.reference import (
    CalibrationEntry,
    SeasonalFactor,
    find_calibration,
    seasonal_factor,
)
from powercast.analytics.series import ParameterName
from powercast.analytics.trend import (
    ConfidenceTier,
    TREND_TAU_YEARS,
    TrendModel,
    compute_trend,
    weighted_average,
)


# ============================================================================
# 常數定義
# ============================================================================

NOWCAST_TAU_YEARS = 3.0  # 近況加權平均的時間常數
RECENT_WINDOW_YEARS = 3  # 近年百分位數使用的年數
RECENT_PERCENTILE = 60

# 預測的變數（依輸出順序）
PREDICTED_PARAMETERS = (
    ParameterName.TEMP_MAX,
    ParameterName.TEMP_MIN,
    ParameterName.WIND_MAX,
    ParameterName.HUMIDITY,
    ParameterName.PRECIPITATION,
)


@dataclass(frozen=True)
class BlendWeights:
    """混合權重"""
    weighted_avg: float = 0.40
    trend: float = 0.35
    recent: float = 0.25


DEFAULT_BLEND_WEIGHTS = BlendWeights()


@dataclass(frozen=True)
class BlendedEstimate:
    """單一變數的混合估計"""
    value: float
    weighted_avg: float
    trend_value: float
    recent_p60: float
    trend: TrendModel


@dataclass(frozen=True)
class Location:
    """查詢位置"""
    lat: float
    lon: float


@dataclass(frozen=True)
class Prediction:
    """點預測結果"""
    temp_max: float
    temp_min: float
    wind_max: float
    humidity: float
    precipitation: float
    year: int
    confidence: Mapping[ParameterName, ConfidenceTier] = field(default_factory=dict)
    trend: Mapping[ParameterName, TrendModel] = field(default_factory=dict)
    calibrated: bool = False
    calibration_name: str | None = None
    season: str = "neutral"

    def to_dict(self) -> dict[str, Any]:
        return {
            "temp_max": self.temp_max,
            "temp_min": self.temp_min,
            "wind_max": self.wind_max,
            "humidity": self.humidity,
            "precipitation": self.precipitation,
            "year": self.year,
            "confidence": {param.value: tier.value for param, tier in self.confidence.items()},
            "trend": {param.value: model.to_dict() for param, model in self.trend.items()},
            "calibrated": self.calibrated,
            "calibration_name": self.calibration_name,
            "season": self.season,
        }


# ============================================================================
# 混合計算
# ============================================================================


def blend_series(
    series: pd.Series,
    current_year: int,
    weights: BlendWeights = DEFAULT_BLEND_WEIGHTS,
    nowcast_tau: float = NOWCAST_TAU_YEARS,
    trend_tau: float = TREND_TAU_YEARS,
) -> BlendedEstimate:
    """將單一序列混合為點預測

    Args:
        series: 以年份為索引的觀測序列
        current_year: 目前年份
        weights: 混合權重
        nowcast_tau: 近況加權平均的時間常數
        trend_tau: 趨勢回歸的時間常數

    Returns:
        BlendedEstimate；空序列各項皆為 0
    """
    clean = series.dropna().sort_index()

    trend = compute_trend(clean, current_year, tau=trend_tau)
    nowcast = weighted_average(clean, current_year, tau=nowcast_tau)
    trend_value = trend.value_at(current_year)
    recent_p60 = percentile(clean.tail(RECENT_WINDOW_YEARS), RECENT_PERCENTILE)

    value = (
        weights.weighted_avg * nowcast
        + weights.trend * trend_value
        + weights.recent * recent_p60
    )

    return BlendedEstimate(
        value=value,
        weighted_avg=nowcast,
        trend_value=trend_value,
        recent_p60=recent_p60,
        trend=trend,
    )


def apply_seasonal_humidity(humidity: float, season: SeasonalFactor) -> float:
    """濕度乘以季節倍率並限制在 0-100"""
    return min(100.0, max(0.0, humidity * season.humidity_multiplier))


def apply_seasonal_precipitation(precipitation: float, season: SeasonalFactor) -> float:
    """降水乘以季節倍率並限制不小於 0"""
    return max(0.0, precipitation * season.precip_multiplier)


def build_prediction(
    series_by_param: Mapping[ParameterName, pd.Series],
    location: Location,
    month: int,
    current_year: int,
) -> Prediction:
    """建立點預測

    Args:
        series_by_param: 參數 → 觀測序列
        location: 查詢位置
        month: 目標月份
        current_year: 目前年份

    Returns:
        Prediction
    """
    empty = pd.Series(dtype=float)
    blended = {
        param: blend_series(series_by_param.get(param, empty), current_year)
        for param in PREDICTED_PARAMETERS
    }

    season = seasonal_factor(month)
    calibration: CalibrationEntry | None = find_calibration(location.lat, location.lon, month)

    if calibration is not None:
        temp_max = calibration.temp_max
        temp_min = calibration.temp_min
    else:
        temp_max = blended[ParameterName.TEMP_MAX].value + season.temp_offset
        temp_min = blended[ParameterName.TEMP_MIN].value + season.temp_offset

    return Prediction(
        temp_max=temp_max,
        temp_min=temp_min,
        wind_max=blended[ParameterName.WIND_MAX].value,
        humidity=apply_seasonal_humidity(blended[ParameterName.HUMIDITY].value, season),
        precipitation=apply_seasonal_precipitation(
            blended[ParameterName.PRECIPITATION].value, season
        ),
        year=current_year,
        confidence={param: est.trend.confidence for param, est in blended.items()},
        trend={param: est.trend for param, est in blended.items()},
        calibrated=calibration is not None,
        calibration_name=calibration.name if calibration else None,
        season=season.season_name,
    )
