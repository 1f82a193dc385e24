# marketplace/services/search_service.py
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.schemas.search_schema import FreelancerResult, SearchCriteria
from marketplace.utils.ranking import rank_freelancers

logger = logging.getLogger(__name__)

class SearchService:
    def __init__(self, db: AsyncSession):
        self.profile_repo = ProfileRepository(db)

    async def search(self, criteria: SearchCriteria) -> List[FreelancerResult]:
        """
        搜尋工作者：
        1. 從資料庫取出所有 Profile + User + 評分統計
        2. 篩選與排序交給 ranking (純函式)
        """
        logger.info(f"Searching freelancers with {criteria.model_dump(exclude_none=True)}")

        candidates = await self.profile_repo.list_freelancers_with_ratings()
        ranked = rank_freelancers(candidates, criteria)

        logger.info(f"Search matched {len(ranked)} of {len(candidates)} freelancers")
        return [FreelancerResult.model_validate(item, from_attributes=True) for item in ranked]
