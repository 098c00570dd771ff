from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
import enum


class InsightCategory(str, enum.Enum):
    PROGRESS = "progress"
    PATTERN = "pattern"
    SUGGESTION = "suggestion"
    ACHIEVEMENT = "achievement"


class Insight(BaseModel):
    """One coaching observation derived from the user's recent activity"""
    title: str
    message: str
    suggestion: str
    category: InsightCategory = Field(
        default=InsightCategory.SUGGESTION,
        validation_alias="type",
    )

    model_config = {"populate_by_name": True}

    @field_validator("category", mode="before")
    @classmethod
    def unknown_category_is_suggestion(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in {c.value for c in InsightCategory}:
                return InsightCategory.SUGGESTION
        return v


class InsightsResponse(BaseModel):
    insights: List[Insight]
    fallback: bool = False
    notice: Optional[str] = None


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1, max_length=4000)


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1, max_length=50)


class AssistantMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str


class ChatChoice(BaseModel):
    index: int = 0
    message: AssistantMessage
    finish_reason: Optional[str] = None


class ChatCompletionResponse(BaseModel):
    """Chat-completion envelope wrapping a single assistant turn"""
    id: Optional[str] = None
    model: Optional[str] = None
    choices: List[ChatChoice]
