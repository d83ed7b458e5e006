"""歷史序列擷取

將資料來源的「參數 → 日期鍵 → 數值」原始表，
轉換為指定月日在歷年的觀測序列。

日期鍵格式為 YYYYMMDD（8 位數字），
數值 <= -900 為資料來源的缺值代碼，一律排除。
"""

from enum import Enum
from typing import Any, Mapping

import pandas as pd


# 缺值代碼門檻（NASA POWER 以 -999 表示無觀測）
MISSING_VALUE_THRESHOLD = -900.0


class ParameterName(str, Enum):
    """觀測參數"""
    TEMP_AVG = "TEMP_AVG"            # 日均溫 (°C)
    TEMP_MAX = "TEMP_MAX"            # 日最高溫 (°C)
    TEMP_MIN = "TEMP_MIN"            # 日最低溫 (°C)
    WIND_AVG = "WIND_AVG"            # 平均風速 (m/s)
    WIND_MAX = "WIND_MAX"            # 最大風速 (m/s)
    HUMIDITY = "HUMIDITY"            # 相對濕度 (%)
    PRECIPITATION = "PRECIPITATION"  # 降水量 (mm)


RawSeries = Mapping[str, Mapping[str, Any]]


def is_missing(value: Any) -> bool:
    """判斷數值是否為缺值（非數值、NaN 或缺值代碼）"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return True
    if value != value:  # NaN
        return True
    return value <= MISSING_VALUE_THRESHOLD


def parse_date_key(date_key: str) -> tuple[int, int, int] | None:
    """解析 YYYYMMDD 日期鍵

    Returns:
        (year, month, day)，格式不符則返回 None
    """
    if not isinstance(date_key, str) or len(date_key) != 8 or not date_key.isdigit():
        return None
    return int(date_key[:4]), int(date_key[4:6]), int(date_key[6:8])


def extract_series(
    values_by_date: Mapping[str, Any] | None,
    month: int,
    day: int,
    name: str | None = None,
) -> pd.Series:
    """擷取單一參數在歷年同月同日的觀測值

    Args:
        values_by_date: 日期鍵 → 數值
        month: 目標月份 (1-12)
        day: 目標日期 (1-31)
        name: Series 名稱

    Returns:
        以年份為索引、依年份遞增排序的 float Series
    """
    observations: dict[int, float] = {}

    for date_key, value in (values_by_date or {}).items():
        parsed = parse_date_key(date_key)
        if parsed is None:
            continue

        year, key_month, key_day = parsed
        if key_month != month or key_day != day or is_missing(value):
            continue

        observations[year] = float(value)

    series = pd.Series(observations, dtype=float, name=name)
    series.index = series.index.astype(int)
    series.index.name = "year"
    return series.sort_index()


def extract_daily_series(
    raw_series: RawSeries,
    month: int,
    day: int,
) -> dict[ParameterName, pd.Series]:
    """擷取所有參數在歷年同月同日的觀測序列

    缺少的參數會得到空序列，而不是拋出例外。

    Args:
        raw_series: 參數名稱 → (日期鍵 → 數值)
        month: 目標月份 (1-12)
        day: 目標日期 (1-31)

    Returns:
        參數 → 年份索引的觀測序列
    """
    return {
        param: extract_series(raw_series.get(param.value), month, day, name=param.value)
        for param in ParameterName
    }
