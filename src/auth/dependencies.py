from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional
from src.config import settings
from src.database import get_db
from src.auth.roles import UserRole, has_required_role
from src.auth.token_service import TokenService
from src.exceptions import ForbiddenError
from src.models import User

# Missing or non-Bearer headers yield None; the services decide what that means
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)

def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    return TokenService(db).authenticate(token)

def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Attach the user when a bearer token is present, otherwise continue anonymously"""
    if not token:
        return None
    return TokenService(db).authenticate(token)

def require_roles(*roles: UserRole):
    """Build a dependency that admits only the given roles"""
    allowed = frozenset(roles)

    def _check_role(current_user: User = Depends(get_current_user)) -> User:
        if not has_required_role(current_user.role, allowed):
            raise ForbiddenError(
                f"Access denied. Required role: {' or '.join(r.value for r in roles)}. Your role: {current_user.role}."
            )
        return current_user

    return _check_role

require_admin = require_roles(UserRole.ADMIN)
