"""Tenant service - principal to craftsman resolution and profile updates"""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError, TenantResolutionError, UpstreamError
from ...models import Craftsman
from .repository import CraftsmanRepository
from .schemas import ProfileUpdate

if TYPE_CHECKING:
    from ...auth import Principal

logger = logging.getLogger(__name__)

DEFAULT_CRAFTSMAN_NAME = "New User"


def derive_display_name(principal: "Principal") -> str:
    """Best-effort display name: full name claim, then name claim, then email local part"""
    metadata = principal.metadata or {}
    for candidate in (metadata.get("full_name"), metadata.get("name")):
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    if principal.email and principal.email.split("@")[0]:
        return principal.email.split("@")[0]
    return DEFAULT_CRAFTSMAN_NAME


class TenantResolver:
    """
    Maps an authenticated principal to its craftsman id, creating the row on
    first use.

    Concurrent first requests from the same principal may each attempt the
    insert; the unique ``user_id`` constraint lets exactly one win and the
    losers re-read the winner's row once. Nothing is cached between requests.
    """

    def __init__(self, db: Session):
        self.repo = CraftsmanRepository(db)

    def resolve_or_create(self, principal: "Principal") -> int:
        # 1. Fast path
        try:
            existing = self.repo.get_by_user_id(principal.id)
        except SQLAlchemyError as e:
            logger.error(f"Craftsman lookup failed for user {principal.id}: {e}")
            raise TenantResolutionError("lookup", cause=e) from e
        if existing:
            return existing.id

        # 2. First request for this principal
        metadata = principal.metadata or {}
        logger.info(f"No craftsman for user {principal.id}, creating one")
        try:
            created = self.repo.create(
                user_id=principal.id,
                name=derive_display_name(principal),
                email=principal.email,
                phone=metadata.get("phone"),
                specialty=metadata.get("specialty"),
            )
            logger.info(f"Created craftsman {created.id} for user {principal.id}")
            return created.id
        except IntegrityError as e:
            # 3. Another request created the row first
            logger.info(f"Craftsman insert conflicted for user {principal.id}, re-reading once")
            conflict = e
        except SQLAlchemyError as e:
            # 4. Any other insert failure
            logger.error(f"Craftsman insert failed for user {principal.id}: {e}")
            raise TenantResolutionError("create", cause=e) from e

        try:
            winner = self.repo.get_by_user_id(principal.id)
        except SQLAlchemyError as e:
            logger.error(f"Craftsman re-lookup failed for user {principal.id}: {e}")
            raise TenantResolutionError("relookup", cause=e) from e
        if winner:
            return winner.id

        logger.error(
            f"Craftsman insert conflicted for user {principal.id} but no row is visible: {conflict}"
        )
        raise TenantResolutionError("relookup", cause=conflict, not_found=True)


class ProfileService:
    """Read and update the caller's own craftsman row"""

    def __init__(self, db: Session):
        self.repo = CraftsmanRepository(db)

    def get_profile(self, craftsman_id: int) -> Craftsman:
        craftsman = self.repo.get_by_id(craftsman_id)
        if not craftsman:
            raise NotFoundError("Craftsman profile not found")
        return craftsman

    def update_profile(self, craftsman_id: int, data: ProfileUpdate) -> Craftsman:
        craftsman = self.get_profile(craftsman_id)
        # id and user_id are not part of ProfileUpdate, so they can never be rebound here
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in ("name", "assistant_enabled")
        }
        try:
            return self.repo.update(craftsman, **updates)
        except SQLAlchemyError as e:
            self.repo.db.rollback()
            raise UpstreamError("Error updating craftsman profile", cause=e) from e
