"""
AI coaching endpoints.

Insight generation always answers with insights (generated or fallback);
chat passes upstream failures through as 429 / 402 / 502.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from social_tracker.core.database import get_db
from social_tracker.api.deps import get_current_user, get_optional_current_user, get_user_today
from social_tracker.models.user import User
from social_tracker.schemas.insights import ChatCompletionResponse, ChatRequest, InsightsResponse
from social_tracker.services.insights_service import AIGatewayError, insights_service
from social_tracker.utils.dates import user_today

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=InsightsResponse)
async def generate_insights(
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Generate 3-4 coaching insights from the last 30 days of activity.

    Never fails the view: unauthenticated callers get the static fallback
    with a 401 status, upstream problems give fallback insights with
    `fallback: true` (and a `notice` for rate limiting or payment issues).
    """
    if current_user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=InsightsResponse(**insights_service.static_fallback()).model_dump(mode="json"),
        )

    today = user_today(current_user.timezone)
    return await insights_service.generate_insights(db, current_user.id, today)


@router.post("/chat", response_model=ChatCompletionResponse)
async def chat(
    request: ChatRequest,
    current_user: User = Depends(get_current_user),
    today: date = Depends(get_user_today),
    db: AsyncSession = Depends(get_db)
):
    """
    Continue a coaching conversation.

    The ordered user/assistant turns are sent with a system prompt carrying
    the user's recent stats; the reply is a single assistant turn in a
    chat-completion envelope.
    """
    messages = [message.model_dump() for message in request.messages]
    try:
        return await insights_service.chat(db, current_user.id, today, messages)
    except AIGatewayError as e:
        logger.warning(f"Chat failed for user {current_user.id}: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.user_message)
