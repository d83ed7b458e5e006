"""測試共用 fixture"""

import numpy as np
import pytest


CURRENT_YEAR = 2026
START_YEAR = 1996


def build_raw_series(month=10, day=4, start_year=START_YEAR, end_year=CURRENT_YEAR - 1, seed=42):
    """建立模擬 NASA POWER 的原始資料（含目標日與前一日）"""
    rng = np.random.default_rng(seed)
    years = range(start_year, end_year + 1)

    means = {
        "TEMP_AVG": (19.0, 1.5),
        "TEMP_MAX": (27.0, 1.8),
        "TEMP_MIN": (11.0, 1.6),
        "WIND_AVG": (3.0, 0.6),
        "WIND_MAX": (7.0, 1.2),
        "HUMIDITY": (55.0, 8.0),
    }

    raw = {}
    for name, (mean, std) in means.items():
        values = {}
        for year in years:
            for d in (day - 1, day):
                values[f"{year}{month:02d}{d:02d}"] = round(float(rng.normal(mean, std)), 2)
        raw[name] = values

    raw["PRECIPITATION"] = {
        f"{year}{month:02d}{d:02d}": round(float(rng.exponential(3.0)), 2)
        for year in years
        for d in (day - 1, day)
    }
    return raw


@pytest.fixture
def raw_series():
    """30 年的 10 月 3-4 日模擬資料"""
    return build_raw_series()


@pytest.fixture
def make_raw_series():
    """可指定月日與年份範圍的模擬資料"""
    return build_raw_series
