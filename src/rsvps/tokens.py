"""Invitation token helpers.

Tokens are UUID strings. Anything that does not parse as a UUID is rejected
before touching the database.
"""

from uuid import UUID

from src.rsvps.errors import ValidationError


def parse(token: str | None) -> str:
    """Return the canonical form of an invitation token.

    Raises:
        ValidationError: the token is missing or is not a UUID
    """
    if not token or not token.strip():
        raise ValidationError("Invitation token is required")
    try:
        return str(UUID(token.strip()))
    except ValueError as e:
        raise ValidationError("Invalid invitation link.") from e
