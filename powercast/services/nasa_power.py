"""NASA POWER 歷史資料服務

從 NASA POWER API 取得單點的每日歷史觀測，
並將其參數名稱轉換為分析模組使用的 ParameterName。

請求失敗（傳輸錯誤、429、5xx）時以指數退避重試，
超過次數上限後拋出 DataProviderError。
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from powercast.analytics.series import ParameterName
from powercast.config import settings
from powercast.exceptions import DataProviderError

logger = logging.getLogger(__name__)


# NASA POWER 參數 → 分析參數
NASA_PARAMETERS: dict[str, ParameterName] = {
    "T2M": ParameterName.TEMP_AVG,
    "T2M_MAX": ParameterName.TEMP_MAX,
    "T2M_MIN": ParameterName.TEMP_MIN,
    "WS2M": ParameterName.WIND_AVG,
    "WS2M_MAX": ParameterName.WIND_MAX,
    "RH2M": ParameterName.HUMIDITY,
    "PRECTOTCORR": ParameterName.PRECIPITATION,
}

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def parse_power_response(data: dict) -> dict[str, dict[str, Any]]:
    """解析 NASA POWER 回應

    Args:
        data: API 回傳的 JSON

    Returns:
        ParameterName 值 → (YYYYMMDD → 數值)；未知參數會被忽略

    Raises:
        ValueError: 回應結構不是預期的 properties.parameter 物件
    """
    if not isinstance(data, dict):
        raise ValueError(f"unexpected response type: {type(data).__name__}")

    properties = data.get("properties")
    if not isinstance(properties, dict):
        raise ValueError("unexpected \"properties\" block")

    parameters = properties.get("parameter")
    if not isinstance(parameters, dict):
        raise ValueError("unexpected \"parameter\" block")

    parsed: dict[str, dict[str, Any]] = {}
    for nasa_name, values in parameters.items():
        param = NASA_PARAMETERS.get(nasa_name)
        if param is None or not isinstance(values, dict):
            continue
        parsed[param.value] = dict(values)

    return parsed


class NasaPowerClient:
    """NASA POWER 每日資料客戶端

    Attributes:
        base_url: 每日資料端點
        max_retries: 最多重試次數（不含第一次請求）
        backoff_base: 指數退避基準秒數，第 n 次重試前等待 backoff_base * 2**n
    """

    def __init__(
        self,
        base_url: str | None = None,
        community: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.base_url = base_url or settings.nasa_power_base_url
        self.community = community or settings.nasa_power_community
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.max_retries = max_retries if max_retries is not None else settings.fetch_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.fetch_backoff_base
        self._client = client
        self._sleep = sleep

    def build_params(self, lat: float, lon: float, start: str, end: str) -> dict[str, str]:
        return {
            "parameters": ",".join(NASA_PARAMETERS),
            "community": self.community,
            "longitude": str(lon),
            "latitude": str(lat),
            "start": start,
            "end": end,
            "format": "JSON",
        }

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.base_url, params=params)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, params=params)

    async def fetch_daily(
        self, lat: float, lon: float, start: str, end: str
    ) -> dict[str, dict[str, Any]]:
        """取得每日歷史資料

        Args:
            lat: 緯度
            lon: 經度
            start: 起始日期 (YYYYMMDD)
            end: 結束日期 (YYYYMMDD)

        Returns:
            ParameterName 值 → (YYYYMMDD → 數值)

        Raises:
            DataProviderError: 重試後仍失敗，或收到不可重試的錯誤
        """
        params = self.build_params(lat, lon, start, end)
        attempts = self.max_retries + 1
        last_status: int | None = None

        for attempt in range(attempts):
            try:
                response = await self._get(params)
            except httpx.TransportError as e:
                last_status = None
                logger.warning(
                    "NASA POWER request error (attempt %d/%d): %s", attempt + 1, attempts, e
                )
            else:
                if response.status_code == 200:
                    try:
                        return parse_power_response(response.json())
                    except ValueError as e:
                        raise DataProviderError(
                            f"NASA POWER returned an invalid response: {e}",
                            attempts=attempt + 1,
                            status_code=200,
                        ) from e

                last_status = response.status_code
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    raise DataProviderError(
                        f"NASA POWER API error: HTTP {response.status_code}",
                        attempts=attempt + 1,
                        status_code=response.status_code,
                    )
                logger.warning(
                    "NASA POWER HTTP %d (attempt %d/%d)",
                    response.status_code, attempt + 1, attempts,
                )

            if attempt < attempts - 1:
                delay = self.backoff_base * 2 ** attempt
                logger.info("Retrying NASA POWER in %.1fs", delay)
                await self._sleep(delay)

        raise DataProviderError(
            f"NASA POWER API unavailable after {attempts} attempts",
            attempts=attempts,
            status_code=last_status,
        )
