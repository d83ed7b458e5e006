"""適應性門檻與極端條件機率

門檻同時考慮兩個訊號，取較極端者：
- 在地訊號：該地點歷史百分位數
- 全域訊號：固定基準門檻，加上趨勢斜率推估 10 年後的漂移

機率為歷年超過門檻的經驗頻率（寒冷為低於門檻），
濕度與大雨機率再乘以季節倍率並上限 100。
"""

from dataclasses import asdict, dataclass
from typing import Any, Mapping

import pandas as pd

from powercast.analytics.engine import Statistics
from powercast.analytics.reference import SeasonalFactor
from powercast.analytics.series import ParameterName
from powercast.analytics.trend import TrendModel


# ============================================================================
# 常數定義
# ============================================================================

DECADE_PROJECTION_YEARS = 10

BASELINE_VERY_HOT = 35.0    # °C
BASELINE_VERY_COLD = 5.0    # °C
BASELINE_VERY_WINDY = 10.0  # m/s
BASELINE_VERY_HUMID = 80.0  # %
BASELINE_HEAVY_RAIN = 10.0  # mm，單日 10mm 即為顯著降雨


@dataclass(frozen=True)
class Thresholds:
    """各極端條件的門檻"""
    very_hot: float
    very_cold: float
    very_windy: float
    very_humid: float
    heavy_rain: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ConditionProbability:
    """單一極端條件的機率"""
    probability: float   # 0-100
    threshold: float
    years_exceeded: int
    total_years: int
    unit: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ConditionSet:
    """五種極端條件"""
    very_hot: ConditionProbability
    very_cold: ConditionProbability
    very_windy: ConditionProbability
    very_humid: ConditionProbability
    heavy_rain: ConditionProbability

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name).to_dict() for name in self.__dataclass_fields__}


# ============================================================================
# 門檻計算
# ============================================================================


def compute_thresholds(
    stats: Mapping[ParameterName, Statistics],
    trends: Mapping[ParameterName, TrendModel],
) -> Thresholds:
    """合併在地百分位數與十年推估的基準門檻

    沒有資料的序列（count 為 0）不提供在地訊號，直接使用基準值。

    Args:
        stats: 參數 → 統計
        trends: 參數 → 趨勢模型

    Returns:
        Thresholds
    """
    temp_max = stats.get(ParameterName.TEMP_MAX, Statistics())
    temp_min = stats.get(ParameterName.TEMP_MIN, Statistics())
    wind_max = stats.get(ParameterName.WIND_MAX, Statistics())
    precip = stats.get(ParameterName.PRECIPITATION, Statistics())

    max_slope = trends.get(ParameterName.TEMP_MAX, TrendModel()).slope
    min_slope = trends.get(ParameterName.TEMP_MIN, TrendModel()).slope

    global_hot = BASELINE_VERY_HOT + max_slope * DECADE_PROJECTION_YEARS
    global_cold = BASELINE_VERY_COLD + min_slope * DECADE_PROJECTION_YEARS

    very_hot = max(temp_max.percentiles.p90, global_hot) if temp_max.count else global_hot
    very_cold = min(temp_min.percentiles.p10, global_cold) if temp_min.count else global_cold
    very_windy = (
        max(wind_max.percentiles.p90, BASELINE_VERY_WINDY)
        if wind_max.count else BASELINE_VERY_WINDY
    )
    heavy_rain = (
        max(precip.percentiles.p75, BASELINE_HEAVY_RAIN)
        if precip.count else BASELINE_HEAVY_RAIN
    )

    return Thresholds(
        very_hot=very_hot,
        very_cold=very_cold,
        very_windy=very_windy,
        very_humid=BASELINE_VERY_HUMID,
        heavy_rain=heavy_rain,
    )


# ============================================================================
# 機率計算
# ============================================================================


def count_exceedances(series: pd.Series, threshold: float, above: bool = True) -> int:
    """計算超過（或低於）門檻的年數"""
    clean = series.dropna()
    if above:
        return int((clean > threshold).sum())
    return int((clean < threshold).sum())


def exceedance_probability(series: pd.Series, threshold: float, above: bool = True) -> float:
    """經驗超越機率 (0-100)

    Args:
        series: 觀測序列
        threshold: 門檻
        above: True 為高於門檻，False 為低於門檻

    Returns:
        機率百分比；空序列返回 0.0
    """
    total = len(series.dropna())
    if total == 0:
        return 0.0
    return count_exceedances(series, threshold, above) / total * 100


def _condition(
    series: pd.Series,
    threshold: float,
    unit: str,
    above: bool = True,
    multiplier: float = 1.0,
) -> ConditionProbability:
    probability = exceedance_probability(series, threshold, above)
    if multiplier != 1.0:
        probability = min(100.0, probability * multiplier)

    return ConditionProbability(
        probability=probability,
        threshold=threshold,
        years_exceeded=count_exceedances(series, threshold, above),
        total_years=len(series.dropna()),
        unit=unit,
    )


def compute_conditions(
    series_by_param: Mapping[ParameterName, pd.Series],
    thresholds: Thresholds,
    season: SeasonalFactor,
) -> ConditionSet:
    """計算五種極端條件的機率

    濕度與大雨機率乘以季節倍率：歷史頻率混合了乾濕季，
    會低估雨季的風險。

    Args:
        series_by_param: 參數 → 觀測序列
        thresholds: 門檻
        season: 目標月份的季節因子

    Returns:
        ConditionSet
    """
    empty = pd.Series(dtype=float)

    def series_for(param: ParameterName) -> pd.Series:
        return series_by_param.get(param, empty)

    return ConditionSet(
        very_hot=_condition(series_for(ParameterName.TEMP_MAX), thresholds.very_hot, "°C"),
        very_cold=_condition(
            series_for(ParameterName.TEMP_MIN), thresholds.very_cold, "°C", above=False
        ),
        very_windy=_condition(series_for(ParameterName.WIND_MAX), thresholds.very_windy, "m/s"),
        very_humid=_condition(
            series_for(ParameterName.HUMIDITY),
            thresholds.very_humid,
            "%",
            multiplier=season.humidity_multiplier,
        ),
        heavy_rain=_condition(
            series_for(ParameterName.PRECIPITATION),
            thresholds.heavy_rain,
            "mm",
            multiplier=season.precip_multiplier,
        ),
    )
