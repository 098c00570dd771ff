"""
Authentication service: registration, login and token rotation.
"""

from __future__ import annotations
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from social_tracker.core.config import settings
from social_tracker.core.security import (
    blacklist_token,
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_token,
)
from social_tracker.models.user import User
from social_tracker.repositories.user_repository import UserRepository
from social_tracker.schemas.auth import UserCreate, UserLogin

logger = logging.getLogger(__name__)


def _issue_tokens(user_id) -> dict:
    return {
        "access_token": create_access_token(data={"sub": str(user_id)}),
        "refresh_token": create_refresh_token(data={"sub": str(user_id)}),
        "token_type": "bearer",
    }


class AuthService:

    def __init__(self, user_repo: Optional[UserRepository] = None):
        self.user_repo = user_repo or UserRepository()

    async def register(self, db: AsyncSession, user_data: UserCreate) -> dict:
        """Create a user and return a fresh token pair."""
        email = user_data.email.lower()
        if await self.user_repo.get_by_email(db, email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        try:
            user = await self.user_repo.create(db, {
                "id": uuid.uuid4(),
                "email": email,
                "password_hash": get_password_hash(user_data.password),
                "full_name": user_data.full_name,
                "timezone": user_data.timezone,
            })
            await db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            await db.rollback()
            logger.warning(f"Registration for {email} rejected by the store: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        logger.info(f"Registered user {user.id}")
        return _issue_tokens(user.id)

    async def login(self, db: AsyncSession, credentials: UserLogin) -> dict:
        user = await self.user_repo.get_by_email(db, credentials.email)
        if user is None or not verify_password(credentials.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return _issue_tokens(user.id)

    async def refresh(self, db: AsyncSession, refresh_token: str) -> dict:
        """Rotate a refresh token: the old one is blacklisted."""
        user_id = verify_token(refresh_token, "refresh")
        user: Optional[User] = None
        if user_id is not None:
            try:
                user = await self.user_repo.get(db, uuid.UUID(user_id))
            except ValueError:
                user = None
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        blacklist_token(refresh_token)
        return {**_issue_tokens(user.id), "expires_in": settings.access_token_expires}

    @staticmethod
    def logout(access_token: str, refresh_token: Optional[str] = None) -> None:
        blacklist_token(access_token)
        if refresh_token:
            blacklist_token(refresh_token)


auth_service = AuthService()
