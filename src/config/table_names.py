from enum import Enum


class TableNames(str, Enum):
    COUPLES = "couples"
    GUEST_CATEGORIES = "guest_categories"
    RSVPS = "rsvps"
