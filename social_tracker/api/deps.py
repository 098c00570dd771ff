from datetime import date
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from social_tracker.core.database import get_db
from social_tracker.core.security import verify_token
from social_tracker.models.user import User
from social_tracker.repositories.user_repository import UserRepository
from social_tracker.utils.dates import user_today
import uuid

security = HTTPBearer(auto_error=False)
user_repo = UserRepository()


async def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession
) -> Optional[User]:
    if credentials is None:
        return None

    user_id = verify_token(credentials.credentials, "access")
    if user_id is None:
        return None

    try:
        return await user_repo.get(db, uuid.UUID(user_id))
    except ValueError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user; 401 tells the client to sign in again"""
    user = await _resolve_user(credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Like get_current_user, but returns None instead of raising"""
    return await _resolve_user(credentials, db)


def get_user_today(current_user: User = Depends(get_current_user)) -> date:
    """The current calendar date in the user's own timezone"""
    return user_today(current_user.timezone)
