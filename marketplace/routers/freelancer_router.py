# marketplace/routers/freelancer_router.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.schemas.profile_schema import FreelancerDetailOut
from marketplace.schemas.search_schema import FreelancerResult, SearchCriteria, SortByEnum
from marketplace.services.profile_service import ProfileService
from marketplace.services.search_service import SearchService

logger = logging.getLogger(__name__)

# 公開 API：不需要登入即可搜尋工作者
router = APIRouter(
    prefix="/freelancers",
    tags=["Freelancers"]
)

@router.get("", response_model=List[FreelancerResult])
async def search_freelancers(
    query: Optional[str] = Query(None, description="名稱 / 職稱 / 技能 關鍵字"),
    category: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, alias="minPrice"),
    max_price: Optional[int] = Query(None, alias="maxPrice"),
    min_rating: Optional[float] = Query(None, alias="rating"),
    max_distance: Optional[float] = Query(None, alias="distance"),
    latitude: Optional[float] = Query(None, alias="lat"),
    longitude: Optional[float] = Query(None, alias="lng"),
    sort_by: Optional[SortByEnum] = Query(None, alias="sortBy"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db)
):
    """
    搜尋工作者：所有條件皆可選，條件之間為 AND。
    """
    try:
        criteria = SearchCriteria(
            query=query or None,
            category=category or None,
            location=location or None,
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            max_distance=max_distance,
            latitude=latitude,
            longitude=longitude,
            sort_by=sort_by,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    results = await SearchService(db).search(criteria)

    # 分頁只在有指定時才做
    if limit is not None:
        return results[offset:offset + limit]
    return results[offset:]

@router.get("/{user_id}", response_model=FreelancerDetailOut)
async def get_freelancer_detail(
    user_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    工作者公開頁面 (Profile、服務、評價、平均評分)
    """
    return await ProfileService(db).get_freelancer_detail(user_id)
