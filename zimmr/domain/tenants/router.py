"""Craftsman profile router"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from .schemas import CraftsmanResponse, ProfileUpdate
from .service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Profile"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("/craftsmen", response_model=CraftsmanResponse)
async def get_craftsman(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Craftsman row of the logged-in user, created on first use"""
    return service.get_profile(craftsman_id)


@router.get("/profile", response_model=CraftsmanResponse)
async def get_profile(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_profile(craftsman_id)


@router.put("/profile", response_model=CraftsmanResponse)
async def update_profile(
    data: ProfileUpdate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Update profile fields; the id and identity binding are never writable"""
    logger.info(f"Updating craftsman profile {craftsman_id}")
    return service.update_profile(craftsman_id, data)
