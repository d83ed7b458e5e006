"""同日預報流程

串接各分析步驟：
1. 擷取歷年同月同日的觀測序列
2. 計算各參數的敘述統計與趨勢
3. 混合出點預測（含校正覆寫與季節調整）
4. 計算適應性門檻與極端條件機率
5. 計算複合風險指數
6. （指定小時時）逐時內插
7. 合理性檢查

整個流程為純函式：不做 I/O、不讀取系統時間（目前年份由呼叫端傳入），
相同輸入必得相同輸出，可在多個請求間並行呼叫。
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

import pandas as pd

from powercast.analytics.engine import Statistics, compute_statistics
from powercast.analytics.hourly import HourlyForecast, build_hourly_forecast
from powercast.analytics.prediction import Location, Prediction, build_prediction
from powercast.analytics.reference import seasonal_factor
from powercast.analytics.risk import RiskScores, compute_risk_scores
from powercast.analytics.series import ParameterName, RawSeries, extract_daily_series
from powercast.analytics.thresholds import (
    ConditionSet,
    Thresholds,
    compute_conditions,
    compute_thresholds,
)
from powercast.analytics.trend import TrendModel, compute_trend
from powercast.analytics.validation import ValidationReport, validate_forecast

logger = logging.getLogger(__name__)


# 計算統計時套用 IQR 離群值過濾的參數（降水、濕度分布偏態，不過濾）
OUTLIER_FILTERED_PARAMETERS = frozenset({
    ParameterName.TEMP_AVG,
    ParameterName.TEMP_MAX,
    ParameterName.TEMP_MIN,
    ParameterName.WIND_AVG,
    ParameterName.WIND_MAX,
})


@dataclass(frozen=True)
class ForecastInput:
    """預報輸入

    Attributes:
        raw_series: 參數名稱 → (YYYYMMDD → 數值)
        target_month: 目標月份 (1-12)
        target_day: 目標日期 (1-31)
        current_year: 目前年份（趨勢推估用）
        location: 查詢位置
        hour: 逐時預報的小時 (0-23)，None 表示不需要
    """
    raw_series: RawSeries
    target_month: int
    target_day: int
    current_year: int
    location: Location
    hour: Optional[int] = None


@dataclass(frozen=True)
class ForecastResult:
    """預報結果"""
    prediction: Prediction
    statistics: Mapping[ParameterName, Statistics]
    trends: Mapping[ParameterName, TrendModel]
    thresholds: Thresholds
    conditions: ConditionSet
    risk_scores: RiskScores
    hourly_forecast: Optional[HourlyForecast] = None
    validation: Optional[ValidationReport] = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "prediction": self.prediction.to_dict(),
            "statistics": {param.value: s.to_dict() for param, s in self.statistics.items()},
            "trends": {param.value: t.to_dict() for param, t in self.trends.items()},
            "thresholds": self.thresholds.to_dict(),
            "conditions": self.conditions.to_dict(),
            "risk_scores": self.risk_scores.to_dict(),
            "hourly_forecast": self.hourly_forecast.to_dict() if self.hourly_forecast else None,
            "validation": self.validation.to_dict() if self.validation else None,
        }


def compute_all_statistics(
    series_by_param: Mapping[ParameterName, pd.Series],
) -> dict[ParameterName, Statistics]:
    """計算所有參數的敘述統計"""
    return {
        param: compute_statistics(
            series, filter_outliers=param in OUTLIER_FILTERED_PARAMETERS
        )
        for param, series in series_by_param.items()
    }


def run_forecast(request: ForecastInput) -> ForecastResult:
    """執行同日預報

    Args:
        request: 預報輸入

    Returns:
        ForecastResult；缺資料的參數以零值統計、預設趨勢降級處理，不拋出例外
    """
    series_by_param = extract_daily_series(
        request.raw_series, request.target_month, request.target_day
    )
    stats = compute_all_statistics(series_by_param)
    trends = {
        param: compute_trend(series, request.current_year)
        for param, series in series_by_param.items()
    }

    prediction = build_prediction(
        series_by_param, request.location, request.target_month, request.current_year
    )

    season = seasonal_factor(request.target_month)
    thresholds = compute_thresholds(stats, trends)
    conditions = compute_conditions(series_by_param, thresholds, season)

    risk_scores = compute_risk_scores(
        predicted_temp_min=prediction.temp_min,
        predicted_temp_max=prediction.temp_max,
        heavy_rain_probability=conditions.heavy_rain.probability,
        mean_humidity=stats[ParameterName.HUMIDITY].mean,
        mean_wind_avg=stats[ParameterName.WIND_AVG].mean,
        mean_wind_max=stats[ParameterName.WIND_MAX].mean,
    )

    hourly = None
    if request.hour is not None:
        hourly = build_hourly_forecast(
            temp_min=prediction.temp_min,
            temp_max=prediction.temp_max,
            stats=stats,
            heavy_rain_probability=conditions.heavy_rain.probability,
            hour=request.hour,
            month=request.target_month,
        )

    logger.debug(
        "Forecast %02d-%02d (%s): tmax=%.1f tmin=%.1f calibrated=%s season=%s",
        request.target_month,
        request.target_day,
        request.current_year,
        prediction.temp_max,
        prediction.temp_min,
        prediction.calibrated,
        prediction.season,
    )

    result = ForecastResult(
        prediction=prediction,
        statistics=stats,
        trends=trends,
        thresholds=thresholds,
        conditions=conditions,
        risk_scores=risk_scores,
        hourly_forecast=hourly,
    )
    return replace(result, validation=validate_forecast(result, request.location))
