"""
Token lifecycle: issue, verify, rotate and revoke access/refresh pairs.

Access tokens are verified from their signature alone. Refresh tokens are also
persisted; a row is usable only while `revoked` is false and `expires_at` is in
the future. Refreshing consumes the presented token: the row is claimed with a
single conditional update and the replacement row is written in the same
transaction, so a token can mint at most one new pair.
"""

from typing import Optional, Tuple

from loguru import logger
from sqlalchemy import delete, or_, update
from sqlalchemy.orm import Session

from src.auth.schemas import TokenPair
from src.auth.service import UserService
from src.auth.utils import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    utcnow,
)
from src.config import settings
from src.database import transaction
from src.exceptions import RevokedTokenError, UnauthenticatedError, UnknownUserError
from src.models import PasswordResetToken, RefreshToken, User


class TokenService:
    """Service for access/refresh token pairs and their persisted sessions"""

    def __init__(self, db: Session):
        self.db = db

    def issue_token_pair(self, user: User) -> TokenPair:
        """Mint a new pair and persist exactly one refresh-token row"""
        with transaction(self.db):
            pair = self._mint_pair(user)
        return pair

    def verify_access(self, token: str) -> dict:
        """Signature, expiry and type check; no store access"""
        return decode_token(token, ACCESS_TOKEN_TYPE)

    def refresh(self, token: str) -> Tuple[TokenPair, User]:
        """Exchange an active refresh token for a new pair, revoking the old one"""
        payload = decode_token(token, REFRESH_TOKEN_TYPE)

        with transaction(self.db):
            claimed = self.db.execute(
                update(RefreshToken)
                .where(
                    RefreshToken.token == token,
                    RefreshToken.user_id == payload["user_id"],
                    RefreshToken.revoked == False,
                    RefreshToken.expires_at > utcnow(),
                )
                .values(revoked=True)
                .execution_options(synchronize_session=False)
            ).rowcount

            if claimed != 1:
                logger.warning(f"Refresh rejected for user {payload['user_id']}: token not active")
                raise RevokedTokenError()

            user = UserService.get_user_by_id(self.db, payload["user_id"])
            if user is None:
                raise UnknownUserError()

            pair = self._mint_pair(user)

        logger.info(f"Rotated refresh token for user {user.id}")
        return pair, user

    def revoke(self, token: str) -> int:
        """Revoke one refresh token; revoking twice is a no-op success"""
        with transaction(self.db):
            flipped = self.db.execute(
                update(RefreshToken)
                .where(RefreshToken.token == token, RefreshToken.revoked == False)
                .values(revoked=True)
                .execution_options(synchronize_session=False)
            ).rowcount
        return flipped

    def revoke_all(self, user_id: int) -> int:
        """Revoke every active refresh token of a user; returns rows flipped"""
        with transaction(self.db):
            flipped = self.db.execute(
                update(RefreshToken)
                .where(RefreshToken.user_id == user_id, RefreshToken.revoked == False)
                .values(revoked=True)
                .execution_options(synchronize_session=False)
            ).rowcount

        logger.info(f"Revoked {flipped} refresh token(s) for user {user_id}")
        return flipped

    def authenticate(self, token: Optional[str]) -> User:
        """Resolve a bearer access token to an active user"""
        if not token:
            raise UnauthenticatedError("No token provided. Include a valid Bearer token in the Authorization header.")

        payload = self.verify_access(token)
        user = UserService.get_user_by_id(self.db, payload["user_id"])
        if user is None:
            raise UnknownUserError()
        return user

    def cleanup_expired_tokens(self) -> int:
        """Delete refresh tokens that are expired or revoked and reset tokens that are expired or used"""
        now = utcnow()
        with transaction(self.db):
            refresh_deleted = self.db.execute(
                delete(RefreshToken)
                .where(or_(RefreshToken.expires_at < now, RefreshToken.revoked == True))
                .execution_options(synchronize_session=False)
            ).rowcount
            reset_deleted = self.db.execute(
                delete(PasswordResetToken)
                .where(or_(PasswordResetToken.expires_at < now, PasswordResetToken.used == True))
                .execution_options(synchronize_session=False)
            ).rowcount

        logger.info(f"Cleaned up {refresh_deleted} refresh and {reset_deleted} password reset token(s)")
        return refresh_deleted + reset_deleted

    def _mint_pair(self, user: User) -> TokenPair:
        access_token, _ = create_access_token(user.id, user.email, user.role)
        refresh_token, refresh_expires_at = create_refresh_token(user.id)

        self.db.add(RefreshToken(user_id=user.id, token=refresh_token, expires_at=refresh_expires_at))
        self.db.flush()

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            refresh_expires_at=refresh_expires_at,
        )
