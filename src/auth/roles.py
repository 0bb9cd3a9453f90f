from enum import Enum
from typing import Iterable, Union

class UserRole(str, Enum):
    """Closed set of account roles"""
    USER = "user"
    ORGANIZER = "organizer"
    ADMIN = "admin"

EVENT_MANAGER_ROLES = frozenset({UserRole.ORGANIZER, UserRole.ADMIN})

def has_required_role(role: Union[str, UserRole], allowed: Iterable[UserRole]) -> bool:
    """Single authorization predicate: is `role` one of the `allowed` roles"""
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return role in set(allowed)
