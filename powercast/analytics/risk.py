"""複合風險指數

以固定權重組合多個預測值與歷史平均，得到 0-100 的風險分數：
- 霜害 (frost)：最低溫低 + 濕度高 + 風弱
- 暴風雨 (storm)：大雨機率 + 強風 + 濕度高
- 熱壓力 (heat_stress)：最高溫高 + 濕度高 + 風弱

分數 >= 70 為高風險，>= 40 為中風險，其餘為低風險；
每個 (風險類型, 等級) 對應固定的建議清單。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


HIGH_RISK_SCORE = 70.0
MEDIUM_RISK_SCORE = 40.0


class RiskType(str, Enum):
    """風險類型"""
    FROST = "frost"
    STORM = "storm"
    HEAT_STRESS = "heat_stress"


class RiskLevel(str, Enum):
    """風險等級"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


RECOMMENDATIONS: dict[RiskType, dict[RiskLevel, tuple[str, ...]]] = {
    RiskType.FROST: {
        RiskLevel.HIGH: ("覆蓋敏感作物", "夜間加溫防寒", "避免傍晚灌溉"),
        RiskLevel.MEDIUM: ("留意夜間氣溫", "預備覆蓋資材"),
        RiskLevel.LOW: ("無需特別處理",),
    },
    RiskType.STORM: {
        RiskLevel.HIGH: ("加固棚架與設施", "延後戶外活動", "檢查排水系統"),
        RiskLevel.MEDIUM: ("持續關注天氣", "準備應變計畫"),
        RiskLevel.LOW: ("無需特別防範",),
    },
    RiskType.HEAT_STRESS: {
        RiskLevel.HIGH: ("增加灌溉頻率", "鋪設覆蓋物保水", "避免在高溫時段從事粗重工作"),
        RiskLevel.MEDIUM: ("留意作物缺水", "改在清晨或傍晚灌溉"),
        RiskLevel.LOW: ("一般管理即可",),
    },
}

DESCRIPTIONS: dict[RiskType, str] = {
    RiskType.FROST: "依最低溫、濕度與風速評估的霜害風險",
    RiskType.STORM: "依大雨機率、風速與濕度評估的暴風雨風險",
    RiskType.HEAT_STRESS: "依最高溫、濕度與風速評估的熱壓力風險",
}


@dataclass(frozen=True)
class RiskScore:
    """風險分數"""
    risk_type: RiskType
    score: float  # 0-100
    level: RiskLevel
    recommendations: tuple[str, ...] = field(default_factory=tuple)
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk_type": self.risk_type.value,
            "score": self.score,
            "level": self.level.value,
            "recommendations": list(self.recommendations),
            "description": self.description,
        }


@dataclass(frozen=True)
class RiskScores:
    """三種複合風險"""
    frost: RiskScore
    storm: RiskScore
    heat_stress: RiskScore

    def to_dict(self) -> dict[str, Any]:
        return {
            "frost": self.frost.to_dict(),
            "storm": self.storm.to_dict(),
            "heat_stress": self.heat_stress.to_dict(),
        }


def clamp_score(raw: float) -> float:
    """將分數限制在 0-100"""
    if raw != raw:  # NaN
        return 0.0
    return min(100.0, max(0.0, raw))


def risk_level(score: float) -> RiskLevel:
    """分數對應的風險等級"""
    if score >= HIGH_RISK_SCORE:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def make_risk_score(risk_type: RiskType, raw: float) -> RiskScore:
    """由原始分數建立風險結果（限制範圍、分級、查建議）"""
    score = clamp_score(raw)
    level = risk_level(score)
    return RiskScore(
        risk_type=risk_type,
        score=score,
        level=level,
        recommendations=RECOMMENDATIONS[risk_type][level],
        description=DESCRIPTIONS[risk_type],
    )


def frost_risk(predicted_temp_min: float, mean_humidity: float, mean_wind_avg: float) -> RiskScore:
    raw = (
        max(0.0, 10 - predicted_temp_min) * 50
        + mean_humidity * 0.3
        + max(0.0, 5 - mean_wind_avg) * 20
    )
    return make_risk_score(RiskType.FROST, raw)


def storm_risk(heavy_rain_probability: float, mean_wind_max: float, mean_humidity: float) -> RiskScore:
    raw = (
        heavy_rain_probability * 0.5
        + (mean_wind_max / 15) * 30
        + (mean_humidity / 100) * 20
    )
    return make_risk_score(RiskType.STORM, raw)


def heat_stress_risk(predicted_temp_max: float, mean_humidity: float, mean_wind_avg: float) -> RiskScore:
    raw = (
        max(0.0, predicted_temp_max - 30) * 3
        + (mean_humidity / 100) * 30
        + max(0.0, 5 - mean_wind_avg) * 10
    )
    return make_risk_score(RiskType.HEAT_STRESS, raw)


def compute_risk_scores(
    predicted_temp_min: float,
    predicted_temp_max: float,
    heavy_rain_probability: float,
    mean_humidity: float,
    mean_wind_avg: float,
    mean_wind_max: float,
) -> RiskScores:
    """計算三種複合風險

    Args:
        predicted_temp_min: 預測最低溫 (°C)
        predicted_temp_max: 預測最高溫 (°C)
        heavy_rain_probability: 大雨機率 (0-100)
        mean_humidity: 歷史平均濕度 (%)
        mean_wind_avg: 歷史平均風速 (m/s)
        mean_wind_max: 歷史平均最大風速 (m/s)

    Returns:
        RiskScores
    """
    return RiskScores(
        frost=frost_risk(predicted_temp_min, mean_humidity, mean_wind_avg),
        storm=storm_risk(heavy_rain_probability, mean_wind_max, mean_humidity),
        heat_stress=heat_stress_risk(predicted_temp_max, mean_humidity, mean_wind_avg),
    )
