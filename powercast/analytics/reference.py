"""靜態參考表

- 校正表：特定地點、月份的實測溫度，落在半徑內時直接覆寫預測溫度
- 季節因子：每月的溫度偏移與濕度、降水倍率

兩張表皆以 JSON 形式隨套件發佈，載入後為唯讀常數。
"""

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Mapping, Optional

from powercast.utils.geo import find_nearest_within_radius


DATA_PACKAGE = "powercast"
DATA_DIRNAME = "data"
CALIBRATION_FILE = "calibration.json"
SEASONAL_FACTORS_FILE = "seasonal_factors.json"


@dataclass(frozen=True)
class CalibrationEntry:
    """校正資料"""
    name: str
    lat: float
    lon: float
    month: int
    temp_max: float   # 實測最高溫 (°C)
    temp_min: float   # 實測最低溫 (°C)
    radius: float     # 適用半徑（度）


@dataclass(frozen=True)
class SeasonalFactor:
    """季節因子"""
    month: int
    temp_offset: float          # 溫度加成 (°C)
    precip_multiplier: float    # 降水倍率
    humidity_multiplier: float  # 濕度倍率
    season_name: str


NEUTRAL_SEASON = SeasonalFactor(
    month=0,
    temp_offset=0.0,
    precip_multiplier=1.0,
    humidity_multiplier=1.0,
    season_name="neutral",
)


def _load_json(filename: str):
    with (resources.files(DATA_PACKAGE) / DATA_DIRNAME / filename).open(encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=None)
def calibration_entries() -> tuple[CalibrationEntry, ...]:
    """取得校正表（載入一次後快取）"""
    return tuple(CalibrationEntry(**raw) for raw in _load_json(CALIBRATION_FILE))


@lru_cache(maxsize=None)
def seasonal_factors() -> Mapping[int, SeasonalFactor]:
    """取得 12 個月的季節因子（唯讀 mapping）"""
    raw = _load_json(SEASONAL_FACTORS_FILE)
    factors = {
        int(month): SeasonalFactor(month=int(month), **values)
        for month, values in raw.items()
    }
    return MappingProxyType(factors)


def seasonal_factor(month: int) -> SeasonalFactor:
    """取得指定月份的季節因子，月份不在表內時返回中性因子"""
    return seasonal_factors().get(month, NEUTRAL_SEASON)


def find_calibration(lat: float, lon: float, month: int) -> Optional[CalibrationEntry]:
    """找出適用的校正資料

    只比對同月份的項目，取半徑內最近的一筆。找不到不是錯誤，
    呼叫端應改用一般統計模型。

    Args:
        lat: 緯度
        lon: 經度
        month: 月份 (1-12)

    Returns:
        CalibrationEntry 或 None
    """
    candidates = [entry for entry in calibration_entries() if entry.month == month]
    return find_nearest_within_radius(lat, lon, candidates)
