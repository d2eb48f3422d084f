"""Material repository - a craftsman sees the default catalog plus their own entries"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Material


class MaterialRepository:
    def __init__(self, db: Session):
        self.db = db

    def _visible_to(self, craftsman_id: int):
        return self.db.query(Material).filter(
            or_(Material.craftsman_id == craftsman_id, Material.is_default.is_(True))
        )

    def list_for_craftsman(self, craftsman_id: int) -> list[Material]:
        return self._visible_to(craftsman_id).order_by(Material.name.asc(), Material.id.asc()).all()

    def get(self, material_id: int, craftsman_id: int) -> Optional[Material]:
        """Own entry or default entry; None for another craftsman's entry"""
        return self._visible_to(craftsman_id).filter(Material.id == material_id).first()

    def create(self, **material_data) -> Material:
        material = Material(**material_data)
        self.db.add(material)
        self.db.commit()
        self.db.refresh(material)
        return material

    def update(self, material: Material, **updates) -> Material:
        for key, value in updates.items():
            if key in ("id", "craftsman_id", "is_default"):
                continue
            if hasattr(material, key):
                setattr(material, key, value)
        self.db.commit()
        self.db.refresh(material)
        return material

    def delete(self, material: Material) -> None:
        self.db.delete(material)
        self.db.commit()
