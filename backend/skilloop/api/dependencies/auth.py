# backend/skilloop/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Bearer tokens come from the hosted auth provider. The token subject is the
profile id; the role is read from the profile row, never from the token.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
import jwt
from sqlalchemy.orm import Session

from ...auth import bearer_scheme, decode_access_token
from ...core.enums import ProfileRole
from ...core.exceptions import ForbiddenException, UnauthorizedException
from ...models.profile import Profile
from ...models.trainer import Trainer
from ...repositories.factory import RepositoryFactory
from ...services.profile_service import ProfileService
from .database import get_db

logger = logging.getLogger(__name__)


def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the caller's profile, provisioning it on the first request."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Not authenticated", code="NOT_AUTHENTICATED")
    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as e:
        logger.info(f"Rejected bearer token: {str(e)}")
        raise UnauthorizedException("Invalid or expired token", code="INVALID_TOKEN")
    return ProfileService(db).get_or_provision(claims)


def get_current_trainer(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
) -> Trainer:
    trainer = RepositoryFactory.create_trainer_repository(db).get_by_user_id(profile.id)
    if trainer is None:
        raise ForbiddenException("A trainer profile is required", code="NOT_A_TRAINER")
    return trainer


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != ProfileRole.ADMIN.value:
        raise ForbiddenException("Admin access required", code="ADMIN_REQUIRED")
    return profile
