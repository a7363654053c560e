"""Errors raised by the RSVP core.

Each error carries the HTTP status it is rendered with by the exception
handler registered in ``src.main``.
"""


class RSVPError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(RSVPError):
    """Malformed token, missing submission data or approval without a category."""

    status_code = 400


class NotFoundError(RSVPError):
    status_code = 404


class ConflictError(RSVPError):
    """Duplicate email/phone, duplicate category name/token/default."""

    status_code = 409


class InvalidTransitionError(ConflictError):
    """The RSVP already left the PENDING state."""

    def __init__(self, current_status: str) -> None:
        self.current_status = current_status
        super().__init__(f"RSVP has already been {current_status.lower()}")


class CapacityExceededError(ConflictError):
    """Approving the RSVP would take the category past its quota."""

    def __init__(self, category_name: str, remaining_guests: int, requested_guests: int) -> None:
        self.category_name = category_name
        self.remaining_guests = remaining_guests
        self.requested_guests = requested_guests
        super().__init__(
            f"Category '{category_name}' has {max(remaining_guests, 0)} spot(s) left, "
            f"{requested_guests} requested"
        )


class PersistenceError(RSVPError):
    """Storage failure. The message is logged, never returned to the caller."""

    status_code = 500


class NotificationError(Exception):
    """Email dispatch failed. Logged by the notifier and never surfaced."""
