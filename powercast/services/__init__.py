"""服務模組

包含外部資料來源與預報流程的串接服務。
"""

from powercast.services.forecast import ForecastReport, ForecastService
from powercast.services.location import (
    CoordinateCache,
    ElevationResolver,
    LocationNameResolver,
)
from powercast.services.nasa_power import NasaPowerClient

__all__ = [
    "ForecastReport",
    "ForecastService",
    "CoordinateCache",
    "ElevationResolver",
    "LocationNameResolver",
    "NasaPowerClient",
]
