"""趨勢分析

以指數時間衰減權重進行加權線性回歸（數值對年份），
讓近年資料主導趨勢：w = exp(-(current_year - year) / tau)。

樣本少於 10 年時不做回歸，直接返回斜率 0、低信心的預設模型，
避免小樣本產生雜訊趨勢。
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd


# ============================================================================
# 常數定義
# ============================================================================

TREND_TAU_YEARS = 5.0  # 回歸權重的時間常數（年）
MIN_TREND_SAMPLES = 10  # 回歸所需的最少年數

HIGH_CONFIDENCE_R2 = 0.5
MEDIUM_CONFIDENCE_R2 = 0.2


class ConfidenceTier(str, Enum):
    """趨勢信心等級"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TrendMethod(str, Enum):
    """趨勢計算方法"""
    WEIGHTED_REGRESSION = "weighted_regression"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class TrendModel:
    """加權線性趨勢模型

    Attributes:
        slope: 每年變化量
        intercept: 截距（以西元年為 x 軸）
        r_squared: 加權決定係數 (0-1)
        confidence: 信心等級
        method: 計算方法
    """
    slope: float = 0.0
    intercept: float = 0.0
    r_squared: float = 0.0
    confidence: ConfidenceTier = ConfidenceTier.LOW
    method: TrendMethod = TrendMethod.INSUFFICIENT_DATA

    def value_at(self, year: int) -> float:
        """趨勢線在指定年份的數值"""
        return self.slope * year + self.intercept

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["confidence"] = self.confidence.value
        result["method"] = self.method.value
        return result


def confidence_tier(r_squared: float) -> ConfidenceTier:
    """依 R² 判定信心等級"""
    if r_squared > HIGH_CONFIDENCE_R2:
        return ConfidenceTier.HIGH
    if r_squared > MEDIUM_CONFIDENCE_R2:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def decay_weights(years: np.ndarray, current_year: int, tau: float) -> np.ndarray:
    """指數衰減權重 w = exp(-(current_year - year) / tau)"""
    return np.exp(-(current_year - years) / tau)


def weighted_average(series: pd.Series, current_year: int, tau: float) -> float:
    """時間加權平均

    Args:
        series: 以年份為索引的觀測序列
        current_year: 目前年份
        tau: 衰減時間常數（年）

    Returns:
        加權平均值；空序列返回 0.0
    """
    clean = series.dropna()
    if len(clean) == 0:
        return 0.0

    years = clean.index.to_numpy(dtype=float)
    values = clean.to_numpy(dtype=float)
    weights = decay_weights(years, current_year, tau)

    return float(np.sum(weights * values) / np.sum(weights))


def compute_trend(
    series: pd.Series,
    current_year: int,
    tau: float = TREND_TAU_YEARS,
) -> TrendModel:
    """計算加權線性趨勢

    Args:
        series: 以年份為索引的觀測序列
        current_year: 目前年份（明確傳入，不讀取系統時間）
        tau: 權重時間常數（年）

    Returns:
        TrendModel；樣本不足時斜率為 0，截距為樣本平均
    """
    clean = series.dropna()

    if len(clean) < MIN_TREND_SAMPLES:
        mean = float(clean.mean()) if len(clean) > 0 else 0.0
        return TrendModel(intercept=mean)

    years = clean.index.to_numpy(dtype=float)
    values = clean.to_numpy(dtype=float)
    weights = decay_weights(years, current_year, tau)
    sum_w = np.sum(weights)

    # 以目前年份為原點，避免年份平方造成的數值誤差
    x = years - current_year
    x_mean = np.sum(weights * x) / sum_w
    y_mean = np.sum(weights * values) / sum_w

    sxx = np.sum(weights * (x - x_mean) ** 2)
    if sxx <= 0:
        return TrendModel(intercept=float(y_mean))

    slope = float(np.sum(weights * (x - x_mean) * (values - y_mean)) / sxx)
    intercept_at_origin = y_mean - slope * x_mean

    predicted = slope * x + intercept_at_origin
    ss_total = np.sum(weights * (values - y_mean) ** 2)
    ss_residual = np.sum(weights * (values - predicted) ** 2)

    # 常數序列只剩浮點誤差，視為沒有可解釋的變異
    if ss_total > np.finfo(float).eps * np.sum(weights * values ** 2):
        r_squared = float(min(1.0, max(0.0, 1 - ss_residual / ss_total)))
    else:
        r_squared = 0.0

    return TrendModel(
        slope=slope,
        intercept=float(intercept_at_origin - slope * current_year),
        r_squared=r_squared,
        confidence=confidence_tier(r_squared),
        method=TrendMethod.WEIGHTED_REGRESSION,
    )
