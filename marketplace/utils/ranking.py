# marketplace/utils/ranking.py
from typing import Any, Dict, List, Optional

from marketplace.schemas.search_schema import SearchCriteria, SortByEnum
from marketplace.utils.geo import distance_km


def _plain(value: Any) -> Any:
    # Enum 欄位 (e.g. CategoryEnum.design) 轉成字串值再比對
    return getattr(value, "value", value)


def _contains(haystack: Optional[str], needle: str) -> bool:
    if not haystack:
        return False
    return needle in haystack.lower()


def matches_query(user: Any, profile: Any, query: str) -> bool:
    """名稱、職稱、任一技能 之中有一個包含 query (不分大小寫) 即符合"""
    needle = query.lower()
    if _contains(user.name, needle) or _contains(profile.title, needle):
        return True
    return any(_contains(skill, needle) for skill in (profile.skills or []))


def matches_filters(user: Any, profile: Any, criteria: SearchCriteria) -> bool:
    """
    資料列層級的條件 (不需要評價或距離即可判斷)。
    各條件之間為 AND。
    """
    if criteria.query and not matches_query(user, profile, criteria.query):
        return False
    if criteria.category and _plain(profile.category) != criteria.category:
        return False
    if criteria.location and not _contains(user.location, criteria.location.lower()):
        return False
    if criteria.min_price is not None and profile.hourly_rate < criteria.min_price:
        return False
    if criteria.max_price is not None and profile.hourly_rate > criteria.max_price:
        return False
    return True


def compute_distance(user: Any, criteria: SearchCriteria) -> Optional[float]:
    """搜尋者與工作者雙方都有座標時才計算距離，否則為 None"""
    if criteria.latitude is None or criteria.longitude is None:
        return None
    if user.latitude is None or user.longitude is None:
        return None
    return distance_km(criteria.latitude, criteria.longitude, user.latitude, user.longitude)


def sort_results(results: List[Dict], sort_by: Optional[SortByEnum]) -> List[Dict]:
    """
    依 sort_by 排序 (Python 的 sort 為穩定排序)。
    - distance：有距離的排在前面 (由近到遠)，沒有距離的維持原順序排在最後
    - None：不重新排序
    """
    if sort_by == SortByEnum.rating:
        return sorted(results, key=lambda x: x["avg_rating"], reverse=True)
    if sort_by == SortByEnum.price_asc:
        return sorted(results, key=lambda x: x["profile"].hourly_rate)
    if sort_by == SortByEnum.price_desc:
        return sorted(results, key=lambda x: x["profile"].hourly_rate, reverse=True)
    if sort_by == SortByEnum.distance:
        return sorted(
            results,
            key=lambda x: (x["distance"] is None, x["distance"] if x["distance"] is not None else 0.0)
        )
    return list(results)


def rank_freelancers(candidates: List[Dict], criteria: SearchCriteria) -> List[Dict]:
    """
    篩選並排序工作者。

    candidates 的每個元素：
        {"user": User, "profile": FreelancerProfile, "avg_rating": float, "review_count": int}

    回傳相同結構並多一個 "distance" (float 或 None)。
    """
    results = []
    for item in candidates:
        user, profile = item["user"], item["profile"]

        # 1. 資料列層級的條件
        if not matches_filters(user, profile, criteria):
            continue

        # 2. 計算距離
        distance = compute_distance(user, criteria)

        # 3. 依計算結果篩選 (距離、評價)
        # 沒有距離的工作者不會被 max_distance 排除
        if criteria.max_distance is not None and distance is not None and distance > criteria.max_distance:
            continue
        if criteria.min_rating is not None and item["avg_rating"] < criteria.min_rating:
            continue

        results.append({**item, "distance": distance})

    # 4. 排序
    return sort_results(results, criteria.sort_by)
