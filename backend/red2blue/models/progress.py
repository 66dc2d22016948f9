from datetime import date, datetime

from pydantic import BaseModel, Field


class ProgressCreateRequest(BaseModel):
    userId: int = Field(..., ge=1)
    date: datetime | None = None
    overallScore: int = Field(..., ge=0, le=100)
    redHeadInstances: int = Field(default=0, ge=0)
    blueHeadInstances: int = Field(default=0, ge=0)
    techniquesUsed: list[str] = Field(default_factory=list)
    practiceMinutes: int = Field(default=0, ge=0, le=600)


class ProgressRecord(BaseModel):
    id: int
    userId: int
    date: datetime
    overallScore: int
    redHeadInstances: int
    blueHeadInstances: int
    techniquesUsed: list[str] = Field(default_factory=list)


class EngagementMetricRecord(BaseModel):
    id: int
    userId: int
    date: date
    chatMessages: int = 0
    techniquesPracticed: int = 0
    assessmentsCompleted: int = 0
    sessionDurationMinutes: int = 0
    engagementScore: int = 0


class EngagementResponse(BaseModel):
    metrics: list[EngagementMetricRecord] = Field(default_factory=list)


class PlanRequest(BaseModel):
    goals: list[str] = Field(default_factory=list)


class PersonalizedPlan(BaseModel):
    weeklyPlan: list[dict] = Field(default_factory=list)
    focusAreas: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    milestones: list[dict] = Field(default_factory=list)
    provider: str = "heuristic_fallback"
