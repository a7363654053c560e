from .base import Base, TimeStamp

__all__ = [
    "Base",
    "TimeStamp",
]
