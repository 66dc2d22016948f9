from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

OverallState = Literal["red_head", "blue_head", "transitional"]


class AssessmentSubmitRequest(BaseModel):
    # Strict: "80", 80.0 and true are rejected rather than coerced.
    userId: int = Field(..., strict=True, ge=1)
    intensityScore: int = Field(..., strict=True, ge=0, le=100)
    decisionMakingScore: int = Field(..., strict=True, ge=0, le=100)
    diversionsScore: int = Field(..., strict=True, ge=0, le=100)
    executionScore: int = Field(..., strict=True, ge=0, le=100)


class AssessmentRecord(BaseModel):
    id: int
    userId: int
    intensityScore: int
    decisionMakingScore: int
    diversionsScore: int
    executionScore: int
    totalScore: int
    createdAt: datetime


class AssessmentAnalysis(BaseModel):
    overallState: OverallState = "transitional"
    strengths: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    recommendedTechniques: list[str] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)
    nextSteps: list[str] = Field(default_factory=list)
    provider: str = "heuristic_fallback"


class AssessmentSubmitResponse(BaseModel):
    assessment: AssessmentRecord
    analysis: AssessmentAnalysis
