from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from social_tracker.core.database import get_db
from social_tracker.api.deps import get_current_user, security
from social_tracker.models.user import User
from social_tracker.schemas.auth import (
    UserCreate, UserLogin, Token, LogoutResponse, RefreshTokenRequest, TokenRefreshResponse
)
from social_tracker.schemas.user import User as UserSchema
from social_tracker.services.auth_service import auth_service

router = APIRouter()


@router.post("/register", response_model=Token)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new user and sign them in"""
    return await auth_service.register(db, user_data)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for an access/refresh token pair"""
    return await auth_service.login(db, credentials)


@router.post("/refresh", response_model=TokenRefreshResponse)
async def refresh(request: RefreshTokenRequest, db: AsyncSession = Depends(get_db)):
    """Rotate a refresh token; the old refresh token stops working"""
    return await auth_service.refresh(db, request.refresh_token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    request: Optional[RefreshTokenRequest] = None,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_user: User = Depends(get_current_user),
):
    """Invalidate the current access token (and the refresh token if given)"""
    auth_service.logout(
        credentials.credentials,
        request.refresh_token if request is not None else None,
    )
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserSchema)
async def read_me(current_user: User = Depends(get_current_user)):
    """Return the signed-in user's profile"""
    return current_user
