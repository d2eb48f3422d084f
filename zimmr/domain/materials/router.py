"""Material router - catalog endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from ...shared.schemas import MessageResponse
from .schemas import CatalogMaterialResponse, MaterialCreate, MaterialUpdate
from .service import MaterialService

router = APIRouter(prefix="/materials", tags=["Materials"])


def get_material_service(db: Session = Depends(get_db)) -> MaterialService:
    return MaterialService(db)


@router.get("", response_model=list[CatalogMaterialResponse])
async def get_materials(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: MaterialService = Depends(get_material_service),
):
    """Default catalog and the craftsman's own materials, by name"""
    return service.list_materials(craftsman_id)


@router.get("/{material_id}", response_model=CatalogMaterialResponse)
async def get_material(
    material_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: MaterialService = Depends(get_material_service),
):
    return service.get_material(material_id, craftsman_id)


@router.post("", response_model=CatalogMaterialResponse, status_code=201)
async def create_material(
    data: MaterialCreate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: MaterialService = Depends(get_material_service),
):
    return service.create_material(data, craftsman_id)


@router.put("/{material_id}", response_model=CatalogMaterialResponse)
async def update_material(
    material_id: int,
    data: MaterialUpdate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: MaterialService = Depends(get_material_service),
):
    """Updating a default material returns a new custom copy"""
    return service.update_material(material_id, data, craftsman_id)


@router.delete("/{material_id}", response_model=MessageResponse)
async def delete_material(
    material_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: MaterialService = Depends(get_material_service),
):
    return service.delete_material(material_id, craftsman_id)
