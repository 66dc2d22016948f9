from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

RecommendationType = Literal["technique", "scenario", "routine", "assessment", "chat_followup"]


class RecommendationRecord(BaseModel):
    id: int
    userId: int
    recommendationType: RecommendationType
    priority: int
    confidenceScore: int
    reasoning: str
    personalizedMessage: str
    expectedOutcome: str | None = None
    recommendationData: dict[str, Any] = Field(default_factory=dict)
    isActive: bool = True
    userFeedback: int | None = None
    feedbackComments: str | None = None
    effectivenessMeasure: int | None = None
    appliedAt: datetime | None = None
    expiresAt: datetime | None = None
    createdAt: datetime


class RecommendationListResponse(BaseModel):
    recommendations: list[RecommendationRecord] = Field(default_factory=list)


class RecommendationFeedbackRequest(BaseModel):
    feedback: int | None = Field(default=None, ge=1, le=5)
    comments: str | None = Field(default=None, max_length=2000)
    effectivenessMeasure: int | None = Field(default=None, ge=0, le=100)


class CoachingInsightRecord(BaseModel):
    id: int
    userId: int
    insightType: str
    category: str
    title: str
    description: str
    dataPoints: dict[str, Any] = Field(default_factory=dict)
    actionableSteps: list[str] = Field(default_factory=list)
    impact: str | None = None
    timeframe: str | None = None
    isAcknowledged: bool = False
    createdAt: datetime


class InsightListResponse(BaseModel):
    insights: list[CoachingInsightRecord] = Field(default_factory=list)


class CoachingProfileRequest(BaseModel):
    preferredStyle: str | None = Field(default=None, max_length=64)
    focusAreas: list[str] | None = None
    goals: list[str] | None = None
    triggers: list[str] | None = None
    notes: str | None = Field(default=None, max_length=4000)


class CoachingProfileRecord(BaseModel):
    id: int
    userId: int
    preferredStyle: str | None = None
    focusAreas: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    triggers: list[str] = Field(default_factory=list)
    notes: str | None = None
    updatedAt: datetime


class CoachingProfileResponse(BaseModel):
    profile: CoachingProfileRecord | None = None
