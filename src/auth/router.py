from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.orm import Session
from src.database import get_db
from src.auth.schemas import (
    UserCreate, LoginRequest, RefreshTokenRequest, UserResponse, AuthResponse,
    RefreshResponse, MessageResponse, LogoutAllResponse, CurrentUserResponse, CleanupResponse
)
from src.auth.service import UserService
from src.auth.token_service import TokenService
from src.auth.dependencies import get_current_user, require_admin
from src.models import User

router = APIRouter()

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and sign them in"""
    db_user = UserService.create_user(db=db, user=user)
    tokens = TokenService(db).issue_token_pair(db_user)
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(db_user),
        tokens=tokens
    )

@router.post("/login", response_model=AuthResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a token pair"""
    user = UserService.authenticate_user(db, login_data.email, login_data.password)
    tokens = TokenService(db).issue_token_pair(user)
    logger.info(f"User {user.id} logged in")
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        tokens=tokens
    )

@router.post("/refresh", response_model=RefreshResponse)
def refresh_tokens(request: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Rotate a refresh token into a new pair"""
    tokens, _ = TokenService(db).refresh(request.refresh_token)
    return RefreshResponse(tokens=tokens)

@router.post("/logout", response_model=MessageResponse)
def logout(request: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Revoke a single refresh token"""
    TokenService(db).revoke(request.refresh_token)
    return MessageResponse(message="Logout successful")

@router.post("/logout-all", response_model=LogoutAllResponse)
def logout_all(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Revoke every active session of the current user"""
    revoked_count = TokenService(db).revoke_all(current_user.id)
    return LogoutAllResponse(
        message="Logged out from all devices successfully",
        revoked_count=revoked_count
    )

@router.get("/me", response_model=CurrentUserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return CurrentUserResponse(user=UserResponse.model_validate(current_user))

@router.post("/maintenance/cleanup", response_model=CleanupResponse)
def cleanup_tokens(admin_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete expired and revoked tokens"""
    deleted_count = TokenService(db).cleanup_expired_tokens()
    return CleanupResponse(
        message=f"Removed {deleted_count} expired or revoked token(s)",
        deleted_count=deleted_count
    )
