from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import uuid

import jwt
from passlib.context import CryptContext

from src.config import settings
from src.exceptions import ExpiredTokenError, InvalidCredentialError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

def utcnow() -> datetime:
    """Naive UTC timestamp, the format token expiries are stored in"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def _encode(claims: dict, secret: str, expires_delta: timedelta) -> Tuple[str, datetime]:
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + expires_delta
    payload = {
        **claims,
        "iat": issued_at,
        "exp": expires_at,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    }
    token = jwt.encode(payload, secret, algorithm=settings.ALGORITHM)
    return token, expires_at.replace(tzinfo=None)

def create_access_token(user_id: int, email: str, role: str, expires_delta: Optional[timedelta] = None) -> Tuple[str, datetime]:
    """Create a short-lived access token; verifiable without a store lookup"""
    claims = {
        "sub": str(user_id),
        "user_id": user_id,
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
    }
    expires_delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(claims, settings.JWT_ACCESS_SECRET, expires_delta)

def create_refresh_token(user_id: int, expires_delta: Optional[timedelta] = None) -> Tuple[str, datetime]:
    """Create a long-lived refresh token; the jti keeps every token string unique"""
    claims = {
        "sub": str(user_id),
        "user_id": user_id,
        "type": REFRESH_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
    }
    expires_delta = expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(claims, settings.JWT_REFRESH_SECRET, expires_delta)

def decode_token(token: str, token_type: str) -> dict:
    """Check signature, expiry, issuer, audience and the type tag"""
    secret = settings.JWT_ACCESS_SECRET if token_type == ACCESS_TOKEN_TYPE else settings.JWT_REFRESH_SECRET
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError(f"{token_type.title()} token expired")
    except jwt.PyJWTError:
        raise InvalidCredentialError(f"Invalid {token_type} token")

    if payload.get("type") != token_type or not isinstance(payload.get("user_id"), int):
        raise InvalidCredentialError("Invalid token type")

    return payload
