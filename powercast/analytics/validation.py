"""預報合理性檢查

在回應前檢查預報結果是否自洽，並給出 0-100 的資料信心分數。
錯誤（errors）表示結果不可信；警告（warnings）表示數值偏離常態。
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from powercast.analytics.series import ParameterName

if TYPE_CHECKING:
    from powercast.analytics.pipeline import ForecastResult
    from powercast.analytics.prediction import Location


# 預測溫度的合理範圍 (°C)
TEMP_MAX_RANGE = (-40.0, 60.0)
TEMP_MIN_RANGE = (-50.0, 50.0)

# 日溫差的合理範圍 (°C)
MAX_DAILY_RANGE = 40.0
MIN_DAILY_RANGE = 2.0

MAX_PLAUSIBLE_WIND = 100.0  # m/s
MIN_RELIABLE_YEARS = 10

WARNING_PENALTY = 5


@dataclass(frozen=True)
class ValidationReport:
    """檢查結果"""
    is_valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)
    confidence: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "confidence": self.confidence,
        }


def validate_forecast(result: "ForecastResult", location: "Location") -> ValidationReport:
    """檢查預報結果

    Args:
        result: 預報結果
        location: 查詢位置

    Returns:
        ValidationReport
    """
    errors: list[str] = []
    warnings: list[str] = []

    prediction = result.prediction
    stats = result.statistics
    temp_avg = stats[ParameterName.TEMP_AVG]

    # 1. 溫度一致性
    if prediction.temp_max < prediction.temp_min:
        errors.append("預測最高溫低於最低溫")

    low, high = TEMP_MAX_RANGE
    if not low <= prediction.temp_max <= high:
        warnings.append(f"預測最高溫 ({prediction.temp_max:.1f}°C) 超出一般範圍")

    low, high = TEMP_MIN_RANGE
    if not low <= prediction.temp_min <= high:
        warnings.append(f"預測最低溫 ({prediction.temp_min:.1f}°C) 超出一般範圍")

    # 2. 日溫差
    daily_range = prediction.temp_max - prediction.temp_min
    if daily_range > MAX_DAILY_RANGE:
        warnings.append(f"日溫差過大 ({daily_range:.1f}°C)")
    if daily_range < MIN_DAILY_RANGE:
        warnings.append(f"日溫差過小 ({daily_range:.1f}°C)")

    # 3. 濕度、風速、降水
    humidity_mean = stats[ParameterName.HUMIDITY].mean
    if not 0 <= humidity_mean <= 100:
        errors.append(f"平均濕度超出 0-100% ({humidity_mean:.1f}%)")

    if stats[ParameterName.WIND_AVG].mean < 0:
        errors.append("平均風速為負值")

    if stats[ParameterName.WIND_MAX].max > MAX_PLAUSIBLE_WIND:
        warnings.append(f"最大風速過高 ({stats[ParameterName.WIND_MAX].max:.1f} m/s)，請檢查資料")

    if stats[ParameterName.PRECIPITATION].mean < 0:
        errors.append("平均降水量為負值")

    # 4. 風險分數
    for name, risk in result.risk_scores.to_dict().items():
        if not 0 <= risk["score"] <= 100:
            errors.append(f"{name} 風險分數超出 0-100")

    # 5. 趨勢 R²
    for param in (ParameterName.TEMP_MAX, ParameterName.TEMP_MIN):
        r_squared = result.trends[param].r_squared
        if not 0 <= r_squared <= 1:
            warnings.append(f"{param.value} 趨勢 R² 超出 0-1 ({r_squared})")

    # 6. 樣本數
    if temp_avg.count < MIN_RELIABLE_YEARS:
        warnings.append(f"歷史資料不足 ({temp_avg.count} 年)")

    # 7. 百分位數順序
    p = temp_avg.percentiles
    if not p.p25 <= p.p50 <= p.p75 <= p.p90:
        errors.append("溫度百分位數未依序遞增")

    # 8. 座標
    if abs(location.lat) > 90:
        errors.append(f"緯度無效: {location.lat}")
    if abs(location.lon) > 180:
        errors.append(f"經度無效: {location.lon}")

    return ValidationReport(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        confidence=confidence_score(result, errors, warnings),
    )


def confidence_score(result: "ForecastResult", errors: list[str], warnings: list[str]) -> int:
    """依資料品質計算信心分數 (0-100)，有錯誤時為 0"""
    if errors:
        return 0

    score = 100 - len(warnings) * WARNING_PENALTY

    avg_r_squared = (
        result.trends[ParameterName.TEMP_MAX].r_squared
        + result.trends[ParameterName.TEMP_MIN].r_squared
    ) / 2
    if avg_r_squared > 0.5:
        score += 10
    elif avg_r_squared < 0.1:
        score -= 15

    temp_avg = result.statistics[ParameterName.TEMP_AVG]
    if temp_avg.count >= 25:
        score += 5
    elif temp_avg.count < 15:
        score -= 10

    if temp_avg.std_dev > 8:
        score -= 10

    return max(0, min(100, score))


def validation_summary(report: ValidationReport) -> dict[str, Any]:
    """產生檢查結果摘要"""
    if not report.is_valid:
        return {
            "status": "error",
            "message": "資料有錯誤，預報結果不可信",
            "details": list(report.errors),
        }

    if report.confidence < 50:
        status, message = "low", "資料有效，但信心偏低"
    elif report.confidence < 70:
        status, message = "warning", "資料有效，但有部分警告"
    else:
        status, message = "excellent", "資料可靠，預報結果一致"

    return {
        "status": status,
        "message": message,
        "confidence": report.confidence,
        "warnings": list(report.warnings),
    }
