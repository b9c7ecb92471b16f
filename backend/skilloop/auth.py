from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi.security import HTTPBearer
import jwt

from .core.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a bearer token issued by the auth provider.

    Raises:
        jwt.PyJWTError: signature, expiry or audience check failed
    """
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.jwt_secret),
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
    )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT shaped like the auth provider's tokens.

    Used by the test suite and service tooling; end users get their tokens
    from the provider.

    Args:
        data: Claims to encode; ``sub`` must be the profile id
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode.setdefault("aud", settings.jwt_audience)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, _secret_value(settings.jwt_secret), algorithm=settings.jwt_algorithm)
