# marketplace/utils/geo.py
import math

# 地球半徑 (公里)
EARTH_RADIUS_KM = 6371.0

def _deg_to_rad(deg: float) -> float:
    return deg * (math.pi / 180)

def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    以 Haversine 公式計算兩個經緯度座標之間的大圓距離 (公里)。
    輸入為角度 (degrees)；任一輸入為 NaN 時結果為 NaN。
    """
    d_lat = _deg_to_rad(lat2 - lat1)
    d_lon = _deg_to_rad(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(_deg_to_rad(lat1)) * math.cos(_deg_to_rad(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
