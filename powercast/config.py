"""應用程式設定模組

使用 pydantic-settings 管理應用程式配置，
支援從環境變數和 .env 檔案載入設定。
"""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """應用程式設定類別

    Attributes:
        app_name: 應用程式名稱
        debug: 是否啟用除錯模式
        log_level: 日誌等級
        nasa_power_base_url: NASA POWER 每日資料端點
        nasa_power_community: NASA POWER 使用者社群代碼
        elevation_api_url: Open Topo Data 高程端點
        geocoding_api_url: Nominatim 反向地理編碼端點
        history_years: 分析的歷史年數
        request_timeout: 外部請求逾時（秒）
        fetch_max_retries: 歷史資料請求的最多重試次數
        fetch_backoff_base: 重試的指數退避基準（秒）
        cors_origins: 允許的跨域來源
    """

    app_name: str = "powercast API"
    debug: bool = False
    log_level: str = "INFO"

    nasa_power_base_url: str = "https://power.larc.nasa.gov/api/temporal/daily/point"
    nasa_power_community: str = "RE"
    elevation_api_url: str = "https://api.opentopodata.org/v1/srtm30m"
    geocoding_api_url: str = "https://nominatim.openstreetmap.org/reverse"
    user_agent: str = "powercast/0.1 (historical climate forecast)"

    history_years: int = 30
    request_timeout: float = 60.0
    fetch_max_retries: int = 3
    fetch_backoff_base: float = 1.0

    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# 全域設定實例
settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """設定根日誌處理器"""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
