# backend/skilloop/services/profile_service.py
"""
Profiles of authenticated accounts.

The hosted auth provider owns identities. The first authenticated request
from a new account provisions its profile row from the token claims.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import ProfileRole
from ..core.exceptions import NotFoundException, UnauthorizedException
from ..models.profile import Profile
from ..repositories.factory import RepositoryFactory
from ..schemas.profile import ProfileUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class ProfileService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.profile_repository = RepositoryFactory.create_profile_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)

    def get_profile(self, profile_id: str) -> Profile:
        profile = self.profile_repository.get_by_id(profile_id)
        if not profile:
            raise NotFoundException("Profile not found", code="PROFILE_NOT_FOUND")
        return profile

    @BaseService.measure_operation("resolve_profile")
    def get_or_provision(self, claims: Dict[str, Any]) -> Profile:
        """
        Return the profile for a verified token, creating it on first sight.

        New accounts always start as clients; elevated roles are granted by
        an admin or by the trainer application flow.
        """
        user_id = claims.get("sub")
        if not user_id:
            raise UnauthorizedException("Token has no subject", code="INVALID_TOKEN")

        profile = self.profile_repository.get_by_id(user_id)
        if profile:
            return profile

        email = (claims.get("email") or "").strip().lower()
        if not email:
            raise UnauthorizedException("Token has no email claim", code="INVALID_TOKEN")
        metadata = claims.get("user_metadata") or {}

        with self.transaction():
            profile = self.profile_repository.create(
                id=user_id,
                email=email,
                full_name=metadata.get("full_name") or claims.get("name"),
                role=ProfileRole.CLIENT.value,
            )
        self.logger.info(f"Provisioned profile {user_id}")
        return profile

    @BaseService.measure_operation("update_profile")
    def update_profile(self, profile: Profile, data: ProfileUpdate) -> Profile:
        changes = data.model_dump(exclude_unset=True)
        with self.transaction():
            for key, value in changes.items():
                setattr(profile, key, value)
            self.profile_repository.flush()
        return profile

    def list_users(
        self, role: Optional[str] = None, q: Optional[str] = None, limit: int = 100, offset: int = 0
    ) -> List[Dict[str, Any]]:
        profiles = self.profile_repository.search(role=role, q=q, limit=limit, offset=offset)
        items = []
        for profile in profiles:
            items.append(
                {
                    "id": profile.id,
                    "email": profile.email,
                    "full_name": profile.full_name,
                    "role": profile.role,
                    "company_name": profile.company_name,
                    "has_trainer_profile": profile.trainer is not None,
                    "created_at": profile.created_at,
                }
            )
        return items

    @BaseService.measure_operation("set_profile_role")
    def set_role(self, profile_id: str, role: ProfileRole) -> Profile:
        profile = self.get_profile(profile_id)
        with self.transaction():
            previous = profile.role
            profile.role = role.value
            self.profile_repository.flush()
        self.log_operation("set_profile_role", profile_id=profile_id, previous=previous, role=role.value)
        return profile
