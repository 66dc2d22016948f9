from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

UrgencyLevel = Literal["low", "medium", "high"]


class CoachingResponse(BaseModel):
    message: str = Field(..., min_length=1)
    suggestions: list[str] = Field(default_factory=list)
    redHeadIndicators: list[str] = Field(default_factory=list)
    blueHeadTechniques: list[str] = Field(default_factory=list)
    urgencyLevel: UrgencyLevel = "low"
    provider: str = "heuristic_fallback"


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime
    metadata: dict[str, Any] | None = None


class ChatSessionRecord(BaseModel):
    id: int
    userId: int
    messages: list[ChatMessage] = Field(default_factory=list)
    createdAt: datetime
    updatedAt: datetime


class ChatRequest(BaseModel):
    userId: int = Field(..., ge=1)
    message: str = Field(..., min_length=1, max_length=4000)
    sessionId: int | None = Field(default=None, ge=1)


class ChatTurnResponse(BaseModel):
    session: ChatSessionRecord
    response: CoachingResponse


class ChatMessagesPage(BaseModel):
    sessionId: int
    total: int
    offset: int
    messages: list[ChatMessage] = Field(default_factory=list)


class ChatFollowUpResponse(BaseModel):
    followUpQuestions: list[str] = Field(default_factory=list)
