"""Authenticated-caller context for admin routes.

Admin requests carry ``Authorization: Bearer <jwt>``. The token is signed
with ``settings.secret_key`` and names the couple in its ``sub`` claim.
Issuing tokens happens elsewhere.
"""

import logging
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config.settings import settings
from src.rsvps.dtos import CoupleDTO
from src.rsvps.repository.read_models import CoupleReadModel, SqlCoupleReadModel

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(
    token: str,
    key: str | None = None,
    algorithms: list[str] | None = None,
) -> UUID:
    """Verify the JWT and return the couple id from its ``sub`` claim.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no usable subject.
    """
    key = key or settings.secret_key
    algorithms = algorithms or [settings.algorithm]
    try:
        payload = jwt.decode(token, key=key, algorithms=algorithms, options={"require": ["sub"]})
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Session expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected admin token: %s", e)
        raise _unauthorized("Invalid or expired token")

    try:
        return UUID(payload["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("Invalid or expired token")


def get_couple_read_model() -> CoupleReadModel:
    """Dependency to get couple read model instance."""
    return SqlCoupleReadModel()


async def get_current_couple(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    read_model: CoupleReadModel = Depends(get_couple_read_model),
) -> CoupleDTO:
    """Resolve the couple calling an admin endpoint."""
    if credentials is None:
        raise _unauthorized("Authorization header is required")

    couple_id = decode_access_token(credentials.credentials)
    couple = await read_model.get_couple(couple_id)
    if couple is None:
        raise _unauthorized("User not found")
    return couple
