"""統計分析模組

提供歷年同日觀測資料的統計、趨勢、預測與風險分析功能。
"""

from powercast.analytics.engine import (
    Statistics,
    compute_statistics,
    filter_outliers_iqr,
    percentile,
)
from powercast.analytics.pipeline import ForecastInput, ForecastResult, run_forecast
from powercast.analytics.prediction import Location, Prediction
from powercast.analytics.series import ParameterName, extract_daily_series
from powercast.analytics.trend import TrendModel, compute_trend

__all__ = [
    "Statistics",
    "compute_statistics",
    "filter_outliers_iqr",
    "percentile",
    "ForecastInput",
    "ForecastResult",
    "run_forecast",
    "Location",
    "Prediction",
    "ParameterName",
    "extract_daily_series",
    "TrendModel",
    "compute_trend",
]
