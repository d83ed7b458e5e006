"""複合風險指數測試"""

import numpy as np
import pytest

from powercast.analytics.risk import (
    RECOMMENDATIONS,
    RiskLevel,
    RiskType,
    clamp_score,
    compute_risk_scores,
    frost_risk,
    heat_stress_risk,
    make_risk_score,
    risk_level,
    storm_risk,
)


class TestRiskFormulas:
    """測試各風險公式"""

    def test_frost_extreme_cold(self):
        """測試極低溫霜害風險為 100"""
        risk = frost_risk(predicted_temp_min=-10, mean_humidity=50, mean_wind_avg=2)

        assert risk.score == 100.0
        assert risk.level == RiskLevel.HIGH

    def test_frost_mild(self):
        """測試溫和夜間"""
        # (10 - 9) * 50 + 0 + 0 = 50
        risk = frost_risk(predicted_temp_min=9, mean_humidity=0, mean_wind_avg=5)

        assert risk.score == pytest.approx(50.0)
        assert risk.level == RiskLevel.MEDIUM

    def test_storm(self):
        """測試暴風雨風險"""
        # 20 * 0.5 + 7.5 / 15 * 30 + 0.5 * 20 = 35
        risk = storm_risk(heavy_rain_probability=20, mean_wind_max=7.5, mean_humidity=50)

        assert risk.score == pytest.approx(35.0)
        assert risk.level == RiskLevel.LOW

    def test_heat_stress(self):
        """測試熱壓力風險"""
        # (40 - 30) * 3 + 0.5 * 30 + (5 - 2) * 10 = 75
        risk = heat_stress_risk(predicted_temp_max=40, mean_humidity=50, mean_wind_avg=2)

        assert risk.score == pytest.approx(75.0)
        assert risk.level == RiskLevel.HIGH

    def test_compute_risk_scores(self):
        """測試三種風險一次計算"""
        scores = compute_risk_scores(
            predicted_temp_min=12,
            predicted_temp_max=25,
            heavy_rain_probability=10,
            mean_humidity=60,
            mean_wind_avg=3,
            mean_wind_max=6,
        )

        assert scores.frost.risk_type == RiskType.FROST
        assert scores.storm.risk_type == RiskType.STORM
        assert scores.heat_stress.risk_type == RiskType.HEAT_STRESS
        assert set(scores.to_dict()) == {"frost", "storm", "heat_stress"}

    @pytest.mark.parametrize("seed", range(10))
    def test_scores_always_bounded(self, seed):
        """測試任意輸入的分數皆在 0-100"""
        rng = np.random.default_rng(seed)
        for _ in range(50):
            values = rng.uniform(-1e9, 1e9, 6)
            scores = compute_risk_scores(*values)
            for risk in (scores.frost, scores.storm, scores.heat_stress):
                assert 0.0 <= risk.score <= 100.0


class TestRiskLevel:
    """測試風險分級"""

    @pytest.mark.parametrize("score, expected", [
        (100.0, RiskLevel.HIGH),
        (70.0, RiskLevel.HIGH),
        (69.9, RiskLevel.MEDIUM),
        (40.0, RiskLevel.MEDIUM),
        (39.9, RiskLevel.LOW),
        (0.0, RiskLevel.LOW),
    ])
    def test_boundaries(self, score, expected):
        assert risk_level(score) == expected

    def test_clamp_nan(self):
        """測試 NaN 分數視為 0"""
        assert clamp_score(float("nan")) == 0.0

    def test_recommendations_follow_level(self):
        """測試建議清單依類型與等級查表"""
        risk = make_risk_score(RiskType.STORM, 85)

        assert risk.recommendations == RECOMMENDATIONS[RiskType.STORM][RiskLevel.HIGH]
        assert risk.to_dict()["level"] == "high"
        assert isinstance(risk.to_dict()["recommendations"], list)
