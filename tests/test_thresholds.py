"""適應性門檻與極端條件機率測試"""

import numpy as np
import pandas as pd
import pytest

from powercast.analytics.engine import compute_statistics
from powercast.analytics.pipeline import ForecastInput, run_forecast
from powercast.analytics.prediction import Location
from powercast.analytics.reference import NEUTRAL_SEASON, SeasonalFactor
from powercast.analytics.series import ParameterName
from powercast.analytics.thresholds import (
    BASELINE_HEAVY_RAIN,
    BASELINE_VERY_COLD,
    BASELINE_VERY_HOT,
    BASELINE_VERY_HUMID,
    BASELINE_VERY_WINDY,
    compute_conditions,
    compute_thresholds,
    count_exceedances,
    exceedance_probability,
)
from powercast.analytics.trend import TrendModel, compute_trend


CURRENT_YEAR = 2026
YEARS = list(range(1996, 2026))


def make_series(values, years=YEARS):
    return pd.Series([float(v) for v in values], index=list(years)[:len(values)], dtype=float)


class TestComputeThresholds:
    """測試門檻合併"""

    def test_empty_uses_baselines(self):
        """測試沒有資料時使用基準門檻"""
        thresholds = compute_thresholds({}, {})

        assert thresholds.very_hot == BASELINE_VERY_HOT
        assert thresholds.very_cold == BASELINE_VERY_COLD
        assert thresholds.very_windy == BASELINE_VERY_WINDY
        assert thresholds.very_humid == BASELINE_VERY_HUMID
        assert thresholds.heavy_rain == BASELINE_HEAVY_RAIN

    def test_local_percentile_wins_when_more_extreme(self):
        """測試在地百分位數較極端時採用在地值"""
        stats = {
            ParameterName.TEMP_MAX: compute_statistics(make_series(range(30, 60))),
            ParameterName.TEMP_MIN: compute_statistics(make_series(range(-30, 0))),
            ParameterName.WIND_MAX: compute_statistics(make_series(range(10, 40))),
            ParameterName.PRECIPITATION: compute_statistics(make_series(range(0, 60, 2))),
        }

        thresholds = compute_thresholds(stats, {})

        assert thresholds.very_hot == pytest.approx(stats[ParameterName.TEMP_MAX].percentiles.p90)
        assert thresholds.very_cold == pytest.approx(stats[ParameterName.TEMP_MIN].percentiles.p10)
        assert thresholds.very_windy == pytest.approx(stats[ParameterName.WIND_MAX].percentiles.p90)
        assert thresholds.heavy_rain == pytest.approx(stats[ParameterName.PRECIPITATION].percentiles.p75)

    def test_trend_projection_shifts_baseline(self):
        """測試趨勢斜率推估十年後的基準"""
        trends = {
            ParameterName.TEMP_MAX: TrendModel(slope=0.1),
            ParameterName.TEMP_MIN: TrendModel(slope=-0.2),
        }

        thresholds = compute_thresholds({}, trends)

        assert thresholds.very_hot == pytest.approx(36.0)
        assert thresholds.very_cold == pytest.approx(3.0)

    @pytest.mark.parametrize("seed", range(20))
    def test_merge_is_monotonic(self, seed):
        """測試門檻不比任一訊號溫和"""
        rng = np.random.default_rng(seed)
        temp_max = make_series(rng.normal(rng.uniform(0, 40), rng.uniform(0.5, 8), 30))
        temp_min = make_series(rng.normal(rng.uniform(-20, 20), rng.uniform(0.5, 8), 30))

        stats = {
            ParameterName.TEMP_MAX: compute_statistics(temp_max),
            ParameterName.TEMP_MIN: compute_statistics(temp_min),
        }
        trends = {
            ParameterName.TEMP_MAX: compute_trend(temp_max, CURRENT_YEAR),
            ParameterName.TEMP_MIN: compute_trend(temp_min, CURRENT_YEAR),
        }

        thresholds = compute_thresholds(stats, trends)

        assert thresholds.very_hot >= stats[ParameterName.TEMP_MAX].percentiles.p90
        assert thresholds.very_hot >= BASELINE_VERY_HOT + trends[ParameterName.TEMP_MAX].slope * 10
        assert thresholds.very_cold <= stats[ParameterName.TEMP_MIN].percentiles.p10
        assert thresholds.very_cold <= BASELINE_VERY_COLD + trends[ParameterName.TEMP_MIN].slope * 10


class TestExceedance:
    """測試經驗機率"""

    def test_direction(self):
        """測試高於與低於門檻"""
        series = make_series([1, 2, 3, 4, 5])

        assert count_exceedances(series, 3) == 2
        assert count_exceedances(series, 3, above=False) == 2
        assert exceedance_probability(series, 3) == pytest.approx(40.0)

    def test_strict_comparison(self):
        """測試等於門檻不計入"""
        assert exceedance_probability(make_series([5, 5, 5]), 5) == 0.0

    def test_empty(self):
        """測試空序列機率為 0"""
        assert exceedance_probability(pd.Series(dtype=float), 10) == 0.0


class TestComputeConditions:
    """測試極端條件機率"""

    def test_very_cold_counts_below(self):
        """測試寒冷為低於門檻"""
        thresholds = compute_thresholds({}, {})
        series = {ParameterName.TEMP_MIN: make_series([0, 2, 4, 6, 8])}

        conditions = compute_conditions(series, thresholds, NEUTRAL_SEASON)

        assert conditions.very_cold.years_exceeded == 3
        assert conditions.very_cold.total_years == 5
        assert conditions.very_cold.probability == pytest.approx(60.0)

    def test_seasonal_multiplier_capped(self):
        """測試季節倍率後機率上限 100"""
        season = SeasonalFactor(
            month=1,
            temp_offset=0.0,
            precip_multiplier=3.0,
            humidity_multiplier=0.5,
            season_name="test",
        )
        series = {
            ParameterName.HUMIDITY: make_series([90] * 10),
            ParameterName.PRECIPITATION: make_series([0] * 5 + [20] * 5),
        }

        conditions = compute_conditions(series, compute_thresholds({}, {}), season)

        assert conditions.heavy_rain.probability == 100.0
        assert conditions.very_humid.probability == pytest.approx(50.0)

    def test_empty_series(self):
        """測試缺資料的條件機率為 0"""
        conditions = compute_conditions({}, compute_thresholds({}, {}), NEUTRAL_SEASON)

        for name, condition in conditions.to_dict().items():
            assert condition["probability"] == 0.0, name
            assert condition["total_years"] == 0

    def test_probability_matches_frequency(self):
        """測試 30 年中單一極端年的熱浪機率等於經驗頻率"""
        values = [30.0] + [31.0] * 28 + [40.0]
        raw = {
            "TEMP_MAX": {f"{year}1004": value for year, value in zip(YEARS, values)},
        }

        result = run_forecast(ForecastInput(
            raw_series=raw,
            target_month=10,
            target_day=4,
            current_year=CURRENT_YEAR,
            location=Location(lat=0.0, lon=0.0),
        ))
        very_hot = result.conditions.very_hot
        expected = sum(1 for v in values if v > very_hot.threshold) / 30 * 100

        assert very_hot.threshold >= BASELINE_VERY_HOT
        assert very_hot.probability == expected
        assert very_hot.total_years == 30
