"""Unit tests for TokenService: issuance, rotation, revocation and the sweep."""

import threading
from datetime import timedelta

import jwt
import pytest

from src.auth.service import UserService
from src.auth.token_service import TokenService
from src.auth.utils import create_access_token, create_refresh_token, utcnow
from src.config import settings
from src.exceptions import (
    ExpiredTokenError,
    InvalidCredentialError,
    RevokedTokenError,
    UnauthenticatedError,
    UnknownUserError,
)
from src.models import RefreshToken


@pytest.fixture
def user(db, make_user):
    user_id, _ = make_user()
    return UserService.get_user_by_id(db, user_id)


@pytest.fixture
def tokens(db):
    return TokenService(db)


def _row(db, token):
    return db.query(RefreshToken).filter(RefreshToken.token == token).one()


class TestIssueAndVerify:

    def test_issue_persists_one_active_refresh_row(self, db, tokens, user):
        pair = tokens.issue_token_pair(user)

        rows = db.query(RefreshToken).filter(RefreshToken.user_id == user.id).all()
        assert len(rows) == 1
        assert rows[0].token == pair.refresh_token
        assert rows[0].revoked is False
        assert rows[0].expires_at > utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS - 1)
        assert pair.token_type == "Bearer"
        assert pair.expires_in == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def test_access_token_carries_identity(self, tokens, user):
        pair = tokens.issue_token_pair(user)

        payload = tokens.verify_access(pair.access_token)

        assert payload["user_id"] == user.id
        assert payload["email"] == "student@clemson.edu"
        assert payload["role"] == "user"
        assert payload["type"] == "access"

    def test_refresh_token_is_not_an_access_token(self, tokens, user):
        pair = tokens.issue_token_pair(user)

        with pytest.raises(InvalidCredentialError):
            tokens.verify_access(pair.refresh_token)

    def test_expired_access_token(self, tokens, user):
        token, _ = create_access_token(user.id, user.email, user.role, expires_delta=timedelta(seconds=-5))

        with pytest.raises(ExpiredTokenError):
            tokens.verify_access(token)

    def test_forged_access_token(self, tokens, user):
        forged = jwt.encode(
            {"user_id": user.id, "type": "access", "aud": settings.JWT_AUDIENCE, "iss": settings.JWT_ISSUER},
            "not-the-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidCredentialError):
            tokens.verify_access(forged)

    def test_two_pairs_never_share_a_refresh_token(self, tokens, user):
        first = tokens.issue_token_pair(user)
        second = tokens.issue_token_pair(user)

        assert first.refresh_token != second.refresh_token


class TestRefresh:

    def test_refresh_rotates_the_token(self, db, tokens, user):
        old = tokens.issue_token_pair(user)

        new, refreshed_user = tokens.refresh(old.refresh_token)

        assert refreshed_user.id == user.id
        assert new.refresh_token != old.refresh_token
        assert _row(db, old.refresh_token).revoked is True
        assert _row(db, new.refresh_token).revoked is False
        assert tokens.verify_access(new.access_token)["user_id"] == user.id

    def test_rotated_token_cannot_be_replayed(self, tokens, user):
        token_a = tokens.issue_token_pair(user).refresh_token
        token_b, _ = tokens.refresh(token_a)

        with pytest.raises(RevokedTokenError):
            tokens.refresh(token_a)

        # The replacement still works
        tokens.refresh(token_b.refresh_token)

    def test_refresh_rejects_access_token(self, tokens, user):
        pair = tokens.issue_token_pair(user)

        with pytest.raises(InvalidCredentialError):
            tokens.refresh(pair.access_token)

    def test_refresh_rejects_unknown_token(self, tokens, user):
        token, _ = create_refresh_token(user.id)

        with pytest.raises(RevokedTokenError):
            tokens.refresh(token)

    def test_expired_jwt_is_rejected(self, tokens, user):
        token, _ = create_refresh_token(user.id, expires_delta=timedelta(seconds=-1))

        with pytest.raises(ExpiredTokenError):
            tokens.refresh(token)

    def test_expired_row_is_not_active(self, db, tokens, user):
        pair = tokens.issue_token_pair(user)
        row = _row(db, pair.refresh_token)
        row.expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

        with pytest.raises(RevokedTokenError):
            tokens.refresh(pair.refresh_token)

    def test_inactive_user_cannot_refresh(self, db, tokens, user):
        pair = tokens.issue_token_pair(user)
        user.is_active = False
        db.commit()

        with pytest.raises(UnknownUserError):
            tokens.refresh(pair.refresh_token)

        # The failed attempt was rolled back, so the row was not consumed
        assert _row(db, pair.refresh_token).revoked is False

    def test_concurrent_refresh_has_one_winner(self, session_factory, tokens, user):
        refresh_token = tokens.issue_token_pair(user).refresh_token
        tokens.db.close()

        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def use_token():
            session = session_factory()
            try:
                barrier.wait()
                TokenService(session).refresh(refresh_token)
                outcome = "ok"
            except RevokedTokenError:
                outcome = "revoked"
            finally:
                session.close()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=use_token) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert sorted(outcomes) == ["ok", "revoked"]


class TestRevocation:

    def test_revoke_is_idempotent(self, tokens, user):
        pair = tokens.issue_token_pair(user)

        assert tokens.revoke(pair.refresh_token) == 1
        assert tokens.revoke(pair.refresh_token) == 0

        with pytest.raises(RevokedTokenError):
            tokens.refresh(pair.refresh_token)

    def test_revoke_unknown_token_is_a_noop(self, tokens):
        assert tokens.revoke("not-a-token") == 0

    def test_revoke_all_reports_rows_flipped(self, db, tokens, user):
        pairs = [tokens.issue_token_pair(user) for _ in range(3)]
        tokens.revoke(pairs[0].refresh_token)

        assert tokens.revoke_all(user.id) == 2

        for pair in pairs:
            with pytest.raises(RevokedTokenError):
                tokens.refresh(pair.refresh_token)
        assert db.query(RefreshToken).filter(RefreshToken.revoked == False).count() == 0

    def test_cleanup_removes_expired_and_revoked(self, db, tokens, user):
        active = tokens.issue_token_pair(user)
        revoked = tokens.issue_token_pair(user)
        expired = tokens.issue_token_pair(user)
        tokens.revoke(revoked.refresh_token)
        _row(db, expired.refresh_token).expires_at = utcnow() - timedelta(days=1)
        db.commit()

        assert tokens.cleanup_expired_tokens() == 2

        remaining = [row.token for row in db.query(RefreshToken).all()]
        assert remaining == [active.refresh_token]


class TestAuthenticate:

    def test_missing_header(self, tokens):
        with pytest.raises(UnauthenticatedError):
            tokens.authenticate(None)

    def test_empty_token(self, tokens):
        with pytest.raises(UnauthenticatedError):
            tokens.authenticate("")

    def test_valid_token_resolves_user(self, tokens, user):
        pair = tokens.issue_token_pair(user)

        assert tokens.authenticate(pair.access_token).id == user.id

    def test_inactive_subject_is_unknown(self, db, tokens, user):
        pair = tokens.issue_token_pair(user)
        user.is_active = False
        db.commit()

        with pytest.raises(UnknownUserError):
            tokens.authenticate(pair.access_token)
