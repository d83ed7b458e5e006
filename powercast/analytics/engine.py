"""統計分析引擎

提供歷年觀測序列的敘述統計，包括：
- 基本統計量（mean, median, std_dev, min, max）
- 百分位數（p10, p25, p50, p75, p90）
- 95% 信賴區間
- IQR 離群值過濾（由呼叫端選擇是否啟用）

計算定義：
- 百分位數：遞增排序後，於 index = p/100 * (n-1) 兩側做線性內插
- 標準差：母體標準差（除以 n）
- 95% 信賴區間：mean ± 1.96 * std_dev / sqrt(n)
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

import numpy as np
import pandas as pd


# ============================================================================
# 常數定義
# ============================================================================

Z_SCORE_95 = 1.96  # 95% 信賴水準

# IQR 離群值過濾
IQR_MULTIPLIER = 2.0  # 邊界 = [Q1 - 2*IQR, Q3 + 2*IQR]
MAX_OUTLIER_FRACTION = 0.10  # 過濾超過 10% 的資料時，不進行過濾


# ============================================================================
# 統計結果
# ============================================================================


@dataclass(frozen=True)
class Percentiles:
    """百分位數"""
    p10: float = 0.0
    p25: float = 0.0
    p50: float = 0.0
    p75: float = 0.0
    p90: float = 0.0


@dataclass(frozen=True)
class ConfidenceInterval:
    """95% 信賴區間"""
    lower: float = 0.0
    upper: float = 0.0
    margin: float = 0.0


@dataclass(frozen=True)
class Statistics:
    """單一觀測序列的敘述統計"""
    mean: float = 0.0
    median: float = 0.0
    std_dev: float = 0.0
    min: float = 0.0
    max: float = 0.0
    count: int = 0
    percentiles: Percentiles = field(default_factory=Percentiles)
    ci95: ConfidenceInterval = field(default_factory=ConfidenceInterval)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ============================================================================
# 基本統計函式
# ============================================================================


def _clean_values(data: pd.Series | Iterable[float]) -> np.ndarray:
    """轉為 float 陣列並移除 NaN"""
    if isinstance(data, pd.Series):
        values = data.to_numpy(dtype=float)
    else:
        values = np.asarray(list(data), dtype=float)
    return values[~np.isnan(values)]


def percentile(data: pd.Series | Iterable[float], p: float) -> float:
    """計算百分位數

    遞增排序後，在 index = p/100 * (n-1) 兩側的資料間做線性內插。

    Args:
        data: 數值資料
        p: 百分位 (0-100)

    Returns:
        百分位數值；空資料返回 0.0
    """
    values = np.sort(_clean_values(data))
    n = len(values)
    if n == 0:
        return 0.0

    index = (p / 100) * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    weight = index - lower

    return float(values[lower] * (1 - weight) + values[upper] * weight)


def filter_outliers_iqr(data: pd.Series, force: bool = False) -> pd.Series:
    """以 IQR 方法過濾離群值

    邊界為 [Q1 - 2*IQR, Q3 + 2*IQR]。若過濾會移除超過 10% 的資料，
    則視為樣本太小或分布偏態，直接返回原始資料（除非 force=True）。

    Args:
        data: 觀測序列
        force: 是否強制套用過濾

    Returns:
        過濾後的序列（保留原索引）
    """
    clean = data.dropna()
    if len(clean) == 0:
        return clean

    q1 = percentile(clean, 25)
    q3 = percentile(clean, 75)
    iqr = q3 - q1
    lower_bound = q1 - IQR_MULTIPLIER * iqr
    upper_bound = q3 + IQR_MULTIPLIER * iqr

    filtered = clean[(clean >= lower_bound) & (clean <= upper_bound)]
    removed = len(clean) - len(filtered)

    if not force and removed > MAX_OUTLIER_FRACTION * len(clean):
        return clean

    return filtered


def compute_statistics(data: pd.Series, filter_outliers: bool = False) -> Statistics:
    """計算敘述統計

    Args:
        data: 數值型 pandas Series
        filter_outliers: 是否先套用 IQR 離群值過濾

    Returns:
        Statistics；空資料返回全為 0、count 為 0 的結果
    """
    clean = data.dropna()
    if filter_outliers:
        clean = filter_outliers_iqr(clean)

    if len(clean) == 0:
        return Statistics()

    values = clean.to_numpy(dtype=float)
    n = len(values)
    mean = float(values.mean())
    std_dev = float(values.std())  # ddof=0，母體標準差
    margin = Z_SCORE_95 * std_dev / math.sqrt(n)

    return Statistics(
        mean=mean,
        median=percentile(values, 50),
        std_dev=std_dev,
        min=float(values.min()),
        max=float(values.max()),
        count=n,
        percentiles=Percentiles(
            p10=percentile(values, 10),
            p25=percentile(values, 25),
            p50=percentile(values, 50),
            p75=percentile(values, 75),
            p90=percentile(values, 90),
        ),
        ci95=ConfidenceInterval(
            lower=mean - margin,
            upper=mean + margin,
            margin=margin,
        ),
    )
