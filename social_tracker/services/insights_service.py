"""
AI coaching insights and chat.

This module assembles a text summary of a user's last 30 days of activity
and forwards it to an OpenAI-compatible chat-completions gateway, either
with a fixed instruction to produce structured insights or together with
the user's running chat transcript.

Insight generation never blocks the view: any upstream or parsing problem
degrades to hand-written fallback insights. Chat surfaces upstream failures
as errors, with rate limiting (429) and payment required (402) classified
separately.
"""

from __future__ import annotations
from collections import Counter
from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import date
import json
import logging
import re

import httpx
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from social_tracker.core.config import settings
from social_tracker.models.interaction import Interaction, InteractionQuality
from social_tracker.models.user_stats import UserStats
from social_tracker.repositories.interaction_repository import InteractionRepository
from social_tracker.repositories.user_stats_repository import UserStatsRepository
from social_tracker.schemas.insights import Insight
from social_tracker.utils.dates import ANALYTICS_WINDOW_DAYS, window_dates

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 4

INSIGHTS_SYSTEM_PROMPT = (
    "You are a supportive social confidence coach. Generate encouraging insights "
    "based on user interaction data. Always be positive and motivational."
)

INSIGHTS_INSTRUCTION = """Generate 3-4 motivational insights that are:
1. Encouraging and positive
2. Based on actual data patterns
3. Include specific suggestions for improvement
4. Focus on building confidence and social skills

Format as JSON with this structure:
{
  "insights": [
    {
      "title": "Insight Title",
      "message": "Encouraging message with specific data",
      "suggestion": "Actionable suggestion",
      "type": "progress" | "pattern" | "suggestion" | "achievement"
    }
  ]
}"""

CHAT_SYSTEM_PROMPT = """You are a friendly, encouraging social confidence coach chatbot. You help users track and improve their social interactions. Be casual, fun, and supportive. Reference their data when relevant. Keep responses concise (2-3 sentences usually). Use encouraging language and celebrate wins.

{context}

When the user asks about their progress, reference the actual numbers. Be specific but conversational."""

STATIC_FALLBACK_INSIGHTS = [
    {
        "title": "Start Your Journey",
        "message": "Every expert was once a beginner. Your social confidence will grow with each interaction.",
        "suggestion": "Begin with small goals - even a simple 'hello' to a stranger counts as progress.",
        "category": "suggestion",
    },
    {
        "title": "Consistency Matters",
        "message": "Building social skills is like building muscle - regular practice makes all the difference.",
        "suggestion": "Try to have at least one meaningful social interaction each day.",
        "category": "progress",
    },
]

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIGatewayError(Exception):
    """Upstream AI call failed (network, non-2xx status, malformed body, missing key)."""

    status_code = 502
    user_message = "AI service is unavailable right now. Please try again later."


class AIRateLimitError(AIGatewayError):
    status_code = 429
    user_message = "Rate limit exceeded. Too many requests right now. Please wait a moment and try again."


class AIPaymentRequiredError(AIGatewayError):
    status_code = 402
    user_message = "AI service requires payment. Please contact support."


class InsightsService:
    """
    Bridge between a user's aggregated activity and the AI gateway.

    Gateway settings default to the application settings and are read on
    every call; pass an http_client to reuse a connection pool (or to
    substitute a transport in tests).
    """

    def __init__(
        self,
        interaction_repo: Optional[InteractionRepository] = None,
        stats_repo: Optional[UserStatsRepository] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
    ):
        self.interaction_repo = interaction_repo or InteractionRepository()
        self.stats_repo = stats_repo or UserStatsRepository()
        self.http_client = http_client
        self.api_key = api_key

    # ------------------------------------------------------------------
    # Context assembly
    # ------------------------------------------------------------------
    @staticmethod
    def build_activity_summary(
        interactions: List[Interaction],
        stats: Optional[UserStats],
        today: date
    ) -> Dict[str, Any]:
        """
        Summarise the user's recent interactions for the prompt.

        Returns:
            {
                "total_interactions": 12,
                "today_interactions": 1,
                "current_streak": 3,
                "avg_rating": 6.5,
                "quality_breakdown": {"Good": 8, "Neutral": 3, "Bad": 1},
                "locations": {"Coffee shop": 4},
                "time_patterns": {"morning": 2, "afternoon": 7, "evening": 3},
                "most_recent_date": date(2026, 10, 18)
            }
        """
        total = len(interactions)
        avg_rating = (
            sum(i.attractiveness_rating for i in interactions) / total if total else 0.0
        )

        quality = Counter(
            i.interaction_quality.value if isinstance(i.interaction_quality, InteractionQuality)
            else str(i.interaction_quality)
            for i in interactions
            if i.interaction_quality is not None
        )
        locations = Counter(i.location for i in interactions if i.location)

        time_patterns = Counter()
        for interaction in interactions:
            hour = interaction.time.hour
            if hour < 12:
                time_patterns["morning"] += 1
            elif hour < 17:
                time_patterns["afternoon"] += 1
            else:
                time_patterns["evening"] += 1

        return {
            "total_interactions": total,
            "today_interactions": sum(1 for i in interactions if i.date == today),
            "current_streak": stats.current_streak if stats is not None else 0,
            "avg_rating": avg_rating,
            "quality_breakdown": dict(quality),
            "locations": dict(locations.most_common(5)),
            "time_patterns": dict(time_patterns),
            "most_recent_date": max((i.date for i in interactions), default=None),
        }

    @staticmethod
    def format_summary(summary: Dict[str, Any]) -> str:
        quality = summary["quality_breakdown"]
        most_recent = summary["most_recent_date"]
        most_recent_text = (
            f"{most_recent.strftime('%b')} {most_recent.day}, {most_recent.year}"
            if most_recent is not None else "None yet"
        )
        return "\n".join([
            "User's Stats:",
            f"- Current streak: {summary['current_streak']} days",
            f"- Total interactions (last {ANALYTICS_WINDOW_DAYS} days): {summary['total_interactions']}",
            f"- Today's interactions: {summary['today_interactions']}",
            f"- Average attractiveness rating: {summary['avg_rating']:.1f}/10",
            f"- Quality breakdown: {quality.get('Good', 0)} good, "
            f"{quality.get('Neutral', 0)} neutral, {quality.get('Bad', 0)} bad",
            f"- Popular locations: {json.dumps(summary['locations'])}",
            f"- Time patterns: {json.dumps(summary['time_patterns'])}",
            f"- Most recent interaction: {most_recent_text}",
        ])

    async def load_summary(
        self,
        db: AsyncSession,
        user_id: UUID,
        today: date
    ) -> Dict[str, Any]:
        days = window_dates(today, ANALYTICS_WINDOW_DAYS)
        interactions = await self.interaction_repo.list_between(db, user_id, days[0], days[-1])
        stats = await self.stats_repo.get_by_user(db, user_id)
        return self.build_activity_summary(interactions, stats, today)

    # ------------------------------------------------------------------
    # Gateway
    # ------------------------------------------------------------------
    async def _chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float
    ) -> Dict[str, Any]:
        api_key = self.api_key if self.api_key is not None else settings.ai_gateway_api_key
        if not api_key:
            logger.error("AI gateway API key is not configured")
            raise AIGatewayError("AI gateway API key is not configured")

        payload = {
            "model": settings.ai_model,
            "messages": messages,
            "temperature": temperature,
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            if self.http_client is not None:
                response = await self.http_client.post(
                    settings.ai_gateway_url, json=payload, headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=settings.ai_request_timeout) as client:
                    response = await client.post(
                        settings.ai_gateway_url, json=payload, headers=headers
                    )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"AI gateway request failed: {e}")
            raise AIGatewayError(f"AI gateway request failed: {e}") from e

        if response.status_code == 429:
            logger.warning("AI gateway rate limited the request")
            raise AIRateLimitError("AI gateway returned 429")
        if response.status_code == 402:
            logger.warning("AI gateway requires payment")
            raise AIPaymentRequiredError("AI gateway returned 402")
        if not response.is_success:
            logger.error(f"AI gateway error: {response.status_code} - {response.text}")
            raise AIGatewayError(f"AI gateway returned {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"AI gateway returned a non-JSON body: {e}")
            raise AIGatewayError("AI gateway returned a non-JSON body") from e

    @staticmethod
    def extract_content(data: Dict[str, Any]) -> str:
        """Pull the assistant text out of a chat-completion envelope."""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIGatewayError("Malformed chat-completion envelope") from e
        if not isinstance(content, str):
            raise AIGatewayError("Chat-completion content is not text")
        return content

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------
    @staticmethod
    def parse_insights(content: str) -> List[Dict[str, Any]]:
        """
        Parse the first JSON object in the model reply into insights.

        Raises:
            ValueError: If no JSON object is found or it has no valid insights
        """
        match = _JSON_OBJECT.search(content)
        if not match:
            raise ValueError("No JSON object found in AI response")

        data = json.loads(match.group(0))
        raw_insights = data.get("insights") if isinstance(data, dict) else None
        if not isinstance(raw_insights, list) or not raw_insights:
            raise ValueError("AI response contains no insights")

        return [
            Insight.model_validate(item).model_dump(mode="json")
            for item in raw_insights[:MAX_INSIGHTS]
        ]

    @staticmethod
    def data_fallback_insights(summary: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Fallback used when the model answered but its reply could not be parsed."""
        total = summary["total_interactions"]
        return [
            {
                "title": "Keep Building Momentum",
                "message": (
                    f"You've logged {total} interactions in the last {ANALYTICS_WINDOW_DAYS} days "
                    "- that's meaningful progress!"
                ),
                "suggestion": "Try to maintain consistency by setting a daily goal of 1-2 interactions.",
                "category": "progress",
            },
            {
                "title": "Quality Improvement",
                "message": (
                    f"Your average rating is {summary['avg_rating']:.1f}/10, which shows you're "
                    "engaging with interesting people."
                    if total > 0 else "Start with small interactions to build confidence."
                ),
                "suggestion": "Focus on genuine conversations rather than just the numbers.",
                "category": "suggestion",
            },
        ]

    @staticmethod
    def static_fallback(notice: Optional[str] = None) -> Dict[str, Any]:
        return {
            "insights": [dict(item) for item in STATIC_FALLBACK_INSIGHTS],
            "fallback": True,
            "notice": notice,
        }

    async def generate_insights(
        self,
        db: AsyncSession,
        user_id: UUID,
        today: date
    ) -> Dict[str, Any]:
        """
        Generate 3-4 coaching insights from the user's last 30 days.

        Returns:
            Dictionary matching InsightsResponse; "fallback" is True whenever
            the insights are hand-written rather than generated.
        """
        try:
            summary = await self.load_summary(db, user_id, today)
        except SQLAlchemyError as e:
            logger.error(f"Could not load activity for insights for user {user_id}: {e}")
            return self.static_fallback()

        prompt = (
            "Analyze this social interaction data and provide encouraging, actionable insights:\n\n"
            f"{self.format_summary(summary)}\n\n"
            f"{INSIGHTS_INSTRUCTION}"
        )
        messages = [
            {"role": "system", "content": INSIGHTS_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        logger.info(f"Generating insights for user {user_id}")
        try:
            data = await self._chat_completion(messages, temperature=0.7)
            content = self.extract_content(data)
        except (AIRateLimitError, AIPaymentRequiredError) as e:
            return self.static_fallback(notice=e.user_message)
        except AIGatewayError as e:
            logger.warning(f"Falling back to static insights for user {user_id}: {e}")
            return self.static_fallback()

        try:
            insights = self.parse_insights(content)
        except ValueError as e:
            logger.warning(f"Could not parse AI insights for user {user_id}: {e}")
            return {
                "insights": self.data_fallback_insights(summary),
                "fallback": True,
                "notice": None,
            }

        return {"insights": insights, "fallback": False, "notice": None}

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------
    async def chat(
        self,
        db: AsyncSession,
        user_id: UUID,
        today: date,
        messages: List[Dict[str, str]]
    ) -> Dict[str, Any]:
        """
        Send the conversation so far, prefixed with the user's activity
        context, and return a single assistant turn.

        Raises:
            AIRateLimitError: Gateway answered 429
            AIPaymentRequiredError: Gateway answered 402
            AIGatewayError: Any other upstream failure
            HTTPException: 500 if the user's activity cannot be loaded
        """
        try:
            summary = await self.load_summary(db, user_id, today)
        except SQLAlchemyError as e:
            logger.error(f"Could not load activity for chat for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not load your activity"
            )

        system_prompt = CHAT_SYSTEM_PROMPT.format(context=self.format_summary(summary))

        logger.info(f"Chat request from user {user_id} with {len(messages)} turns")
        data = await self._chat_completion(
            [{"role": "system", "content": system_prompt}, *messages],
            temperature=0.8,
        )
        content = self.extract_content(data)
        choice = data["choices"][0]

        return {
            "id": data.get("id"),
            "model": data.get("model"),
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": choice.get("finish_reason") if isinstance(choice, dict) else None,
                }
            ],
        }


insights_service = InsightsService()
