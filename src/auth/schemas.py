from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from datetime import datetime
import re

from src.auth.roles import UserRole

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")

class UserCreate(BaseModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.USER

    @validator("email")
    def normalize_email(cls, v):
        return v.strip().lower()

    @validator("password")
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        if not (_UPPER.search(v) and _LOWER.search(v) and _DIGIT.search(v)):
            raise ValueError("Password must contain at least one uppercase letter, one lowercase letter, and one number")
        return v

    @validator("first_name", "last_name")
    def validate_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("First name and last name must be at least 2 characters long")
        return v

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @validator("email")
    def normalize_email(cls, v):
        return v.strip().lower()

class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, alias="refreshToken")

    class Config:
        populate_by_name = True

class UserResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_verified: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_expires_at: datetime

class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: UserResponse
    tokens: TokenPair

class RefreshResponse(BaseModel):
    success: bool = True
    message: str = "Tokens refreshed successfully"
    tokens: TokenPair

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class LogoutAllResponse(MessageResponse):
    revoked_count: int

class CurrentUserResponse(BaseModel):
    success: bool = True
    user: UserResponse

class CleanupResponse(MessageResponse):
    deleted_count: int
