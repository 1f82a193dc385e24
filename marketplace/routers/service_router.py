# marketplace/routers/service_router.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_current_user
from marketplace.models.user import User
from marketplace.schemas.service_schema import ServiceCreate, ServiceOut, ServiceUpdate
from marketplace.services.offering_service import OfferingService

router = APIRouter(
    prefix="/services",
    tags=["Services"]
)

@router.get("/freelancer/{profile_id}", response_model=List[ServiceOut])
async def list_freelancer_services(
    profile_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await OfferingService(db).list_services(profile_id)

@router.get("/{service_id}", response_model=ServiceOut)
async def get_service(
    service_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await OfferingService(db).get_service(service_id)

@router.post("", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
async def create_service(
    data: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    (工作者) 新增一項可被預約的服務
    """
    return await OfferingService(db).create_service(current_user, data)

@router.patch("/{service_id}", response_model=ServiceOut)
async def update_service(
    service_id: str,
    data: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await OfferingService(db).update_service(service_id, current_user, data)

@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await OfferingService(db).delete_service(service_id, current_user)
