from datetime import date
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from social_tracker.core.database import get_db
from social_tracker.api.deps import get_current_user, get_user_today
from social_tracker.models.user import User
from social_tracker.schemas.account import DeleteAllDataResponse
from social_tracker.services.account_service import account_service

router = APIRouter()


@router.get("/export", response_class=Response)
async def export_data(
    current_user: User = Depends(get_current_user),
    today: date = Depends(get_user_today),
    db: AsyncSession = Depends(get_db)
):
    """Download every interaction as a CSV file stamped with today's date"""
    content = await account_service.export_csv(db, current_user.id)
    filename = account_service.export_filename(today)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/data", response_model=DeleteAllDataResponse)
async def delete_all_data(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Permanently delete all interactions and stats. This cannot be undone."""
    return await account_service.delete_all_data(db, current_user.id)
