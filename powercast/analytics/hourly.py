"""逐時內插

以日最低溫、最高溫推估指定小時的溫度，採兩段式日變化曲線：
- 升溫段（hour_of_min → hour_of_max）：
  temp = tmin + A * sin(t * π/2) ** warming_speed
- 降溫段（hour_of_max → 隔日 hour_of_min，較長的夜間時段）：
  temp = tmin + A * (1 - t) ** cooling_speed

t 為該時段已經過的比例，A = tmax - tmin。兩段在 hour_of_max 與
hour_of_min 皆連續。曲線參數依季節覆寫（冬季、夏季各一組，
另有單一月份的校正組），以貼近實測的夜間慣性降溫。

逐時降雨機率為日大雨機率乘上六個時段的係數（午後對流最高 ×2.0，
清晨最低 ×0.2），上限 100。
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from powercast.analytics.engine import Statistics
from powercast.analytics.series import ParameterName


HOURS_PER_DAY = 24

# 日溫差轉為範圍時使用的標準差比例
HOURLY_RANGE_STD_FACTOR = 0.5


@dataclass(frozen=True)
class DiurnalProfile:
    """日變化曲線參數"""
    hour_of_min: int = 6
    hour_of_max: int = 15
    warming_speed: float = 1.0
    cooling_speed: float = 1.0


DEFAULT_PROFILE = DiurnalProfile()

# 南半球季節：夏季日照長、午後高溫較晚；冬季夜間輻射冷卻強
SUMMER_PROFILE = DiurnalProfile(hour_of_min=6, hour_of_max=15, warming_speed=1.0, cooling_speed=1.3)
WINTER_PROFILE = DiurnalProfile(hour_of_min=7, hour_of_max=14, warming_speed=1.2, cooling_speed=1.8)

SUMMER_MONTHS = frozenset({12, 1, 2})
WINTER_MONTHS = frozenset({6, 7, 8})

# 單一月份的校正參數（10 月，依實測逐時資料擬合）
MONTH_PROFILE_OVERRIDES: Mapping[int, DiurnalProfile] = {
    10: DiurnalProfile(hour_of_min=6, hour_of_max=14, warming_speed=0.9, cooling_speed=1.6),
}

# (起始小時, 結束小時, 係數)，含兩端
RAIN_FACTOR_BUCKETS: tuple[tuple[int, int, float], ...] = (
    (0, 5, 0.2),    # 清晨最低
    (6, 10, 0.5),
    (11, 13, 1.2),
    (14, 18, 2.0),  # 午後對流高峰
    (19, 21, 1.0),
    (22, 23, 0.4),
)


def diurnal_profile(month: int) -> DiurnalProfile:
    """取得指定月份的日變化曲線參數"""
    if month in MONTH_PROFILE_OVERRIDES:
        return MONTH_PROFILE_OVERRIDES[month]
    if month in SUMMER_MONTHS:
        return SUMMER_PROFILE
    if month in WINTER_MONTHS:
        return WINTER_PROFILE
    return DEFAULT_PROFILE


def warming_temperature(temp_min: float, amplitude: float, t: float, speed: float) -> float:
    """升溫段公式"""
    return temp_min + amplitude * math.sin(t * math.pi / 2) ** speed


def cooling_temperature(temp_min: float, amplitude: float, t: float, speed: float) -> float:
    """降溫段公式"""
    return temp_min + amplitude * (1 - t) ** speed


def interpolate_temperature(
    temp_min: float,
    temp_max: float,
    hour: int,
    month: int,
    profile: DiurnalProfile | None = None,
) -> float:
    """推估指定小時的溫度

    Args:
        temp_min: 日最低溫 (°C)
        temp_max: 日最高溫 (°C)
        hour: 小時 (0-23)
        month: 月份 (1-12)，用於選擇曲線參數
        profile: 指定曲線參數（不指定時依月份選擇）

    Returns:
        推估溫度 (°C)
    """
    profile = profile or diurnal_profile(month)
    amplitude = temp_max - temp_min
    hour_of_min = profile.hour_of_min
    hour_of_max = profile.hour_of_max

    if hour_of_min <= hour <= hour_of_max:
        t = (hour - hour_of_min) / (hour_of_max - hour_of_min)
        return warming_temperature(temp_min, amplitude, t, profile.warming_speed)

    cooling_hours = HOURS_PER_DAY - hour_of_max + hour_of_min
    if hour > hour_of_max:
        hours_since_max = hour - hour_of_max
    else:
        hours_since_max = HOURS_PER_DAY - hour_of_max + hour

    t = hours_since_max / cooling_hours
    return cooling_temperature(temp_min, amplitude, t, profile.cooling_speed)


def hourly_rain_factor(hour: int) -> float:
    """指定小時的降雨係數"""
    for start, end, factor in RAIN_FACTOR_BUCKETS:
        if start <= hour <= end:
            return factor
    return 1.0


def hourly_rain_probability(daily_probability: float, hour: int) -> float:
    """逐時降雨機率（上限 100）"""
    return min(100.0, daily_probability * hourly_rain_factor(hour))


def rain_note(hour: int) -> str:
    """降雨時段說明"""
    factor = hourly_rain_factor(hour)
    if factor > 1:
        return "降雨機率較高的時段"
    if factor < 1:
        return "降雨機率較低的時段"
    return "一般降雨機率"


@dataclass(frozen=True)
class TemperatureRange:
    min: float
    max: float


@dataclass(frozen=True)
class HistoricalHourly:
    """以歷史百分位數推估的同時刻溫度"""
    median: float
    p25: float
    p75: float
    p90: float


@dataclass(frozen=True)
class HourlyForecast:
    """逐時預報"""
    hour: int
    expected_temp: float
    range: TemperatureRange
    rain_probability: float
    rain_note: str
    historical: HistoricalHourly

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_hourly_forecast(
    temp_min: float,
    temp_max: float,
    stats: Mapping[ParameterName, Statistics],
    heavy_rain_probability: float,
    hour: int,
    month: int,
) -> HourlyForecast:
    """建立逐時預報

    Args:
        temp_min: 預測最低溫
        temp_max: 預測最高溫
        stats: 參數 → 統計（使用日均溫標準差與最高/最低溫百分位數）
        heavy_rain_probability: 日大雨機率 (0-100)
        hour: 小時 (0-23)
        month: 月份 (1-12)

    Returns:
        HourlyForecast
    """
    profile = diurnal_profile(month)
    expected = interpolate_temperature(temp_min, temp_max, hour, month, profile)

    avg_std = stats.get(ParameterName.TEMP_AVG, Statistics()).std_dev
    spread = avg_std * HOURLY_RANGE_STD_FACTOR

    min_stats = stats.get(ParameterName.TEMP_MIN, Statistics())
    max_stats = stats.get(ParameterName.TEMP_MAX, Statistics())

    def historical_at(low: float, high: float) -> float:
        return interpolate_temperature(low, high, hour, month, profile)

    return HourlyForecast(
        hour=hour,
        expected_temp=expected,
        range=TemperatureRange(min=expected - spread, max=expected + spread),
        rain_probability=hourly_rain_probability(heavy_rain_probability, hour),
        rain_note=rain_note(hour),
        historical=HistoricalHourly(
            median=historical_at(min_stats.median, max_stats.median),
            p25=historical_at(min_stats.percentiles.p25, max_stats.percentiles.p25),
            p75=historical_at(min_stats.percentiles.p75, max_stats.percentiles.p75),
            p90=historical_at(min_stats.percentiles.p90, max_stats.percentiles.p90),
        ),
    )
