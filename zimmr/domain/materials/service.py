"""Material service - Business logic for the material catalog"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import ForbiddenError, NotFoundError, UpstreamError
from ...models import Material
from .repository import MaterialRepository
from .schemas import MaterialCreate, MaterialUpdate

logger = logging.getLogger(__name__)


class MaterialService:
    """
    Default materials are read-only templates. Editing one creates a custom
    copy owned by the craftsman; deleting one is forbidden.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = MaterialRepository(db)

    def list_materials(self, craftsman_id: int) -> list[Material]:
        return self.repo.list_for_craftsman(craftsman_id)

    def get_material(self, material_id: int, craftsman_id: int) -> Material:
        material = self.repo.get(material_id, craftsman_id)
        if not material:
            raise NotFoundError("Material not found")
        return material

    def create_material(self, data: MaterialCreate, craftsman_id: int) -> Material:
        try:
            material = self.repo.create(craftsman_id=craftsman_id, is_default=False, **data.model_dump())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Error creating material", cause=e) from e
        logger.info(f"Created material {material.id} for craftsman {craftsman_id}")
        return material

    def update_material(self, material_id: int, data: MaterialUpdate, craftsman_id: int) -> Material:
        material = self.get_material(material_id, craftsman_id)
        updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        try:
            if material.is_default:
                custom = self.repo.create(
                    craftsman_id=craftsman_id,
                    is_default=False,
                    name=updates.get("name", material.name),
                    unit=updates.get("unit", material.unit),
                    price=updates.get("price", material.price),
                )
                logger.info(
                    f"Craftsman {craftsman_id} customized default material {material.id} as {custom.id}"
                )
                return custom
            return self.repo.update(material, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Error updating material", cause=e) from e

    def delete_material(self, material_id: int, craftsman_id: int) -> dict:
        material = self.get_material(material_id, craftsman_id)
        if material.is_default:
            raise ForbiddenError("Cannot delete default materials")
        try:
            self.repo.delete(material)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Error deleting material", cause=e) from e
        return {"message": "Material deleted successfully"}
