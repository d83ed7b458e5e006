"""例外定義"""


class PowercastError(Exception):
    """powercast 例外基底類別"""


class DataProviderError(PowercastError):
    """歷史資料來源在重試後仍無法取得資料

    Attributes:
        attempts: 已嘗試次數
        status_code: 最後一次的 HTTP 狀態碼（傳輸錯誤時為 None）
    """

    def __init__(self, message: str, attempts: int = 0, status_code: int | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.status_code = status_code
