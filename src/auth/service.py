from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from loguru import logger
from typing import Optional

from src.models import User
from src.auth.schemas import UserCreate
from src.auth.utils import get_password_hash, verify_password, pwd_context, utcnow
from src.database import transaction
from src.exceptions import ConflictError, InvalidCredentialError

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str, include_inactive: bool = False) -> Optional[User]:
        """Get user by email; inactive accounts are excluded unless asked for"""
        query = db.query(User).filter(User.email == email.strip().lower())
        if not include_inactive:
            query = query.filter(User.is_active == True)
        return query.first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get active user by ID"""
        return db.query(User).filter(User.id == user_id, User.is_active == True).first()

    @staticmethod
    def create_user(db: Session, user: UserCreate) -> User:
        """Create a new user"""
        if UserService.get_user_by_email(db, user.email, include_inactive=True):
            raise ConflictError("An account with this email address already exists")

        db_user = User(
            email=user.email,
            password_hash=get_password_hash(user.password),
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
        )

        try:
            with transaction(db):
                db.add(db_user)
                db.flush()
        except IntegrityError:
            raise ConflictError("An account with this email address already exists")

        logger.info(f"User created with ID: {db_user.id} ({db_user.role})")
        return db_user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> User:
        """Check credentials and stamp the login time"""
        user = UserService.get_user_by_email(db, email)
        password_hash = user.password_hash if user else None
        # Hashing is slow; no snapshot stays open while it runs
        db.rollback()

        if not user:
            # Keep timing close to the found-user path
            pwd_context.dummy_verify()
            logger.info("Login failed: unknown email")
            raise InvalidCredentialError("Invalid email or password")

        if not verify_password(password, password_hash):
            logger.info(f"Login failed for user {user.id}")
            raise InvalidCredentialError("Invalid email or password")

        with transaction(db):
            user.last_login = utcnow()

        return user
