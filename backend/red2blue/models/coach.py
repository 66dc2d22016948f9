from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from red2blue.models.assessment import AssessmentRecord


class StudentTrend(BaseModel):
    direction: Literal["improving", "declining", "stable"] = "stable"
    change: int = 0


class StudentSummary(BaseModel):
    id: int
    username: str
    email: str | None = None
    lastAssessment: AssessmentRecord | None = None
    assessmentCount: int = 0
    lastActivity: datetime
    riskLevel: Literal["low", "medium", "high"] = "low"
    trends: StudentTrend = Field(default_factory=StudentTrend)


class AssessmentHistoryPoint(BaseModel):
    date: datetime
    totalScore: int
    intensity: int
    decisionMaking: int
    diversions: int
    execution: int


class ToolUsage(BaseModel):
    name: str
    lastUsed: datetime | None = None


class StudentDetail(BaseModel):
    userId: int
    assessmentHistory: list[AssessmentHistoryPoint] = Field(default_factory=list)
    toolUsage: list[ToolUsage] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
