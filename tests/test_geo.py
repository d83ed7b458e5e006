"""地理計算工具測試"""

from dataclasses import dataclass

import pytest

from powercast.utils.geo import coordinate_key, euclidean_degrees, find_nearest_within_radius


@dataclass
class Point:
    name: str
    lat: float
    lon: float
    radius: float


def test_euclidean_degrees_same_point():
    """測試同一點距離為 0"""
    assert euclidean_degrees(-17.39, -66.15, -17.39, -66.15) == 0.0


def test_euclidean_degrees():
    """測試 3-4-5 直角三角形"""
    assert euclidean_degrees(0, 0, 3, 4) == pytest.approx(5.0)


def test_find_nearest_within_radius():
    """測試找半徑內最近的項目"""
    entries = [
        Point("A", -17.0, -66.0, 0.5),
        Point("B", -17.2, -66.1, 0.5),
        Point("C", -20.0, -60.0, 5.0),
    ]

    result = find_nearest_within_radius(-17.25, -66.1, entries)

    assert result.name == "B"


def test_find_nearest_respects_own_radius():
    """測試距離超出項目半徑時不採用"""
    entries = [Point("A", 0.0, 0.0, 0.1)]

    assert find_nearest_within_radius(0.2, 0.0, entries) is None
    assert find_nearest_within_radius(0.1, 0.0, entries).name == "A"


def test_find_nearest_returns_same_instance():
    """測試返回原本的項目物件（含唯讀屬性的項目）"""
    @dataclass(frozen=True)
    class Station:
        lat: float
        lon: float
        radius: float

    station = Station(-17.39, -66.15, 0.5)

    assert find_nearest_within_radius(-17.4, -66.2, [station]) is station


def test_find_nearest_empty_list():
    """測試空列表"""
    assert find_nearest_within_radius(25.0, 121.5, []) is None


def test_coordinate_key():
    """測試座標正規化為 4 位小數"""
    assert coordinate_key(-17.3935, -66.157) == "-17.3935,-66.1570"
    assert coordinate_key(-17.39351, -66.15704) == coordinate_key(-17.3935, -66.157)
