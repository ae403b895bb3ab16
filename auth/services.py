# src/auth/services.py
import logging
import secrets

from fastapi import HTTPException, status
from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import List, Optional
from auth.models import User
from auth.schemas import UserCreate, UserProfileUpdate
from config import settings

logger = logging.getLogger(__name__)


class AuthService:
    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        return AuthService.pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return AuthService.pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def token_for_user(user: User) -> dict:
        access_token = AuthService.create_access_token(data={"sub": str(user.id)})
        return {"access_token": access_token, "token_type": "bearer"}

    @staticmethod
    def decode_token(token: str) -> Optional[dict]:
        """Decode a JWT, returning None if it is invalid or expired."""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            return None

    @staticmethod
    def get_user(user_id: int, db: Session) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_or_404(user_id: int, db: Session) -> User:
        user = AuthService.get_user(user_id, db)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @staticmethod
    def get_user_by_email(email: str, db: Session) -> Optional[User]:
        """Retrieve a user by email (case-insensitive)."""
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    @staticmethod
    def get_user_by_username(username: str, db: Session) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def authenticate_user(login: str, password: str, db: Session) -> Optional[User]:
        user = AuthService.get_user_by_username(login, db) or AuthService.get_user_by_email(login, db)
        if not user or not AuthService.verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for {login!r}")
            return None
        return user

    @staticmethod
    def authorize(current_user: User, owner_id: int) -> None:
        """Ensure the acting user owns the resource they are about to change."""
        if current_user.id != owner_id:
            logger.warning(f"User {current_user.id} denied access to resource owned by {owner_id}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to modify this resource")

    @staticmethod
    def create_user(user_data: UserCreate, db: Session) -> User:
        if AuthService.get_user_by_email(user_data.email, db):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
        if AuthService.get_user_by_username(user_data.username, db):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

        profile = user_data.model_dump(exclude={"username", "password", "full_name", "email"}, exclude_none=True)
        new_user = User(
            username=user_data.username,
            email=user_data.email,
            full_name=user_data.full_name,
            password_hash=AuthService.hash_password(user_data.password),
            **profile,
        )
        return AuthService._insert_user(new_user, db)

    @staticmethod
    def _insert_user(user: User, db: Session) -> User:
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username or email already exists")
        db.refresh(user)
        logger.info(f"Registered user {user.username} (id={user.id})")
        return user

    @staticmethod
    def link_oauth_identity(
            provider: str,
            email: str,
            display_name: Optional[str],
            avatar_url: Optional[str],
            db: Session
    ) -> User:
        """Match an external identity to a user by email, creating the user on first login."""
        user = AuthService.get_user_by_email(email, db)
        if user:
            return user

        base_name = email.split("@")[0] or (display_name or "").replace(" ", "") or "user"
        new_user = User(
            username=f"{base_name}_{secrets.token_hex(4)}",
            email=email,
            full_name=display_name or base_name,
            # OAuth accounts never log in with a password
            password_hash=AuthService.hash_password(secrets.token_hex(16)),
            profile_picture=avatar_url,
            bio=f"User connected via {provider.capitalize()}",
            website="",
        )
        return AuthService._insert_user(new_user, db)

    @staticmethod
    def update_profile(user: User, profile_data: UserProfileUpdate, db: Session) -> User:
        for field, value in profile_data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def search_users(query: str, limit: int, db: Session) -> List[User]:
        escaped = query.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        return (
            db.query(User)
            .filter(or_(
                func.lower(User.username).like(pattern, escape="\\"),
                func.lower(User.full_name).like(pattern, escape="\\")
            ))
            .order_by(User.id)
            .limit(limit)
            .all()
        )
