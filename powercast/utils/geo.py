"""地理座標工具

提供以經緯度「度」為單位的平面距離計算，
用於校正表的半徑比對與快取鍵的座標正規化。
"""

import math
from typing import Optional, Protocol, Sequence, TypeVar


# 快取鍵的座標小數位數（約 11 公尺精度）
COORDINATE_KEY_PRECISION = 4


class RadiusEntry(Protocol):
    """具備中心座標與半徑（度）的項目"""

    @property
    def lat(self) -> float: ...

    @property
    def lon(self) -> float: ...

    @property
    def radius(self) -> float: ...


EntryT = TypeVar("EntryT", bound=RadiusEntry)


def euclidean_degrees(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float
) -> float:
    """計算兩個座標間的歐氏距離（單位：度）

    校正表的半徑以「度」定義，因此不做球面修正。

    Args:
        lat1: 第一點緯度
        lon1: 第一點經度
        lat2: 第二點緯度
        lon2: 第二點經度

    Returns:
        兩點間的平面距離（度）
    """
    return math.hypot(lat2 - lat1, lon2 - lon1)


def find_nearest_within_radius(
    lat: float,
    lon: float,
    entries: Sequence[EntryT]
) -> Optional[EntryT]:
    """找出半徑範圍內最近的項目

    Args:
        lat: 查詢緯度
        lon: 查詢經度
        entries: 候選項目

    Returns:
        最近且位於自身半徑內的項目，如果沒有則返回 None
    """
    nearest = None
    min_distance = float("inf")

    for entry in entries:
        dist = euclidean_degrees(lat, lon, entry.lat, entry.lon)

        if dist <= entry.radius and dist < min_distance:
            min_distance = dist
            nearest = entry

    return nearest


def coordinate_key(lat: float, lon: float) -> str:
    """將座標正規化為快取鍵，例如 "-17.3935,-66.1570" """
    return f"{lat:.{COORDINATE_KEY_PRECISION}f},{lon:.{COORDINATE_KEY_PRECISION}f}"
