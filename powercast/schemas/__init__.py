# powercast/schemas/__init__.py
"""Pydantic Schema 模組"""

from powercast.schemas.forecast import (
    AnalysisSchema,
    ApiResponse,
    ForecastResponse,
    HourlyForecastSchema,
    PredictionSchema,
    RiskScoresSchema,
    StatisticsSchema,
)

__all__ = [
    "AnalysisSchema",
    "ApiResponse",
    "ForecastResponse",
    "HourlyForecastSchema",
    "PredictionSchema",
    "RiskScoresSchema",
    "StatisticsSchema",
]
