"""位置資訊服務

- 高程：Open Topo Data (SRTM 30m)，失敗時返回 0 公尺
- 地名：Nominatim 反向地理編碼，失敗時返回格式化座標

兩者共用呼叫端傳入的 CoordinateCache（以四位小數座標為鍵），
避免重複查詢外部 API 的速率限制。高程只作為回應的附帶資訊，
NASA POWER 資料已含高程修正，分析流程不使用。
"""

import logging
import math
import threading
from typing import Any, Optional

import httpx

from powercast.config import settings
from powercast.utils.geo import coordinate_key

logger = logging.getLogger(__name__)


class CoordinateCache:
    """以座標為鍵的記憶體快取（後寫入者為準）"""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, lat: float, lon: float) -> Optional[Any]:
        with self._lock:
            return self._data.get(coordinate_key(lat, lon))

    def set(self, lat: float, lon: float, value: Any) -> None:
        with self._lock:
            self._data[coordinate_key(lat, lon)] = value

    def __contains__(self, key: tuple[float, float]) -> bool:
        lat, lon = key
        with self._lock:
            return coordinate_key(lat, lon) in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


def format_coordinates(lat: float, lon: float) -> str:
    """座標顯示字串，例如 "17.3935°S, 66.1570°W" """
    lat_dir = "N" if lat >= 0 else "S"
    lon_dir = "E" if lon >= 0 else "W"
    return f"{abs(lat):.4f}°{lat_dir}, {abs(lon):.4f}°{lon_dir}"


def parse_elevation(data: Any) -> Optional[float]:
    """解析 Open Topo Data 回應

    Returns:
        第一筆結果的高程（公尺）；狀態不是 OK 或結構、數值不符時返回 None
    """
    if not isinstance(data, dict) or data.get("status") != "OK":
        return None

    results = data.get("results")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return None

    elevation = results[0].get("elevation")
    if isinstance(elevation, bool) or not isinstance(elevation, (int, float)):
        return None
    if not math.isfinite(elevation):
        return None

    return float(elevation)


class ElevationResolver:
    """高程查詢"""

    def __init__(
        self,
        cache: CoordinateCache,
        api_url: str | None = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.cache = cache
        self.api_url = api_url or settings.elevation_api_url
        self.timeout = timeout
        self._client = client

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.api_url, params=params)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.api_url, params=params)

    async def resolve(self, lat: float, lon: float) -> float:
        """取得高程（公尺）

        Returns:
            高程；查詢失敗時返回 0.0（不寫入快取）
        """
        cached = self.cache.get(lat, lon)
        if cached is not None:
            logger.debug("Elevation cache hit for %s", coordinate_key(lat, lon))
            return cached

        try:
            response = await self._get({"locations": f"{lat},{lon}"})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Elevation lookup failed, using 0m: %s", e)
            return 0.0

        elevation = parse_elevation(data)
        if elevation is None:
            logger.warning("Elevation unavailable for %s, using 0m", coordinate_key(lat, lon))
            return 0.0

        self.cache.set(lat, lon, elevation)
        return elevation


class LocationNameResolver:
    """地名查詢"""

    def __init__(
        self,
        cache: CoordinateCache,
        api_url: str | None = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.cache = cache
        self.api_url = api_url or settings.geocoding_api_url
        self.timeout = timeout
        self._client = client

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        headers = {"User-Agent": settings.user_agent}
        if self._client is not None:
            return await self._client.get(self.api_url, params=params, headers=headers)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.api_url, params=params, headers=headers)

    async def resolve(self, lat: float, lon: float) -> str:
        """取得地名

        Returns:
            地名；查詢失敗時返回格式化座標（不寫入快取）
        """
        cached = self.cache.get(lat, lon)
        if cached is not None:
            return cached

        params = {"lat": str(lat), "lon": str(lon), "format": "jsonv2", "zoom": "10"}
        try:
            response = await self._get(params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Reverse geocoding failed: %s", e)
            return format_coordinates(lat, lon)

        name = data.get("display_name") if isinstance(data, dict) else None
        if not isinstance(name, str) or not name:
            return format_coordinates(lat, lon)

        self.cache.set(lat, lon, name)
        return name
