# marketplace/routers/profile_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_current_user
from marketplace.models.user import User
from marketplace.schemas.profile_schema import FreelancerProfileCreate, FreelancerProfileOut
from marketplace.services.profile_service import ProfileService

router = APIRouter(
    prefix="/freelancer-profile",
    tags=["Profile"],
    dependencies=[Depends(get_current_user)]
)

@router.get("", response_model=FreelancerProfileOut)
async def get_my_profile(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    (工作者) 取得自己的 Profile
    """
    return await ProfileService(db).get_my_profile(current_user)

@router.post("", response_model=FreelancerProfileOut)
async def create_or_update_my_profile(
    data: FreelancerProfileCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    (工作者) 建立或更新自己的 Profile
    """
    return await ProfileService(db).create_or_update_profile(current_user, data)
