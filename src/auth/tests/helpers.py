from datetime import UTC, datetime, timedelta

import jwt

from src.config.settings import settings


def make_access_token(couple_id, expires_in: timedelta = timedelta(hours=1), **claims) -> str:
    """Sign an admin token accepted by get_current_couple."""
    now = datetime.now(UTC)
    payload = {"sub": str(couple_id), "iat": now, "exp": now + expires_in, **claims}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)
