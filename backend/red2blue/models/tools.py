from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

AreaScore = Annotated[int, Field(strict=True, ge=0, le=100)]


class MentalSkillsXCheckCreateRequest(BaseModel):
    """One post-round self check: a score per shot for each mental area, plus reflection."""

    userId: int = Field(..., ge=1)
    intensityScores: list[AreaScore] = Field(..., min_length=1)
    decisionMakingScores: list[AreaScore] = Field(..., min_length=1)
    diversionsScores: list[AreaScore] = Field(..., min_length=1)
    executionScores: list[AreaScore] = Field(..., min_length=1)
    context: str | None = None
    whatDidWell: str | None = None
    whatCouldDoBetter: str | None = None
    actionPlan: str | None = None


class MentalSkillsXCheckRecord(BaseModel):
    id: int
    userId: int
    intensityScores: list[int]
    decisionMakingScores: list[int]
    diversionsScores: list[int]
    executionScores: list[int]
    context: str | None = None
    whatDidWell: str | None = None
    whatCouldDoBetter: str | None = None
    actionPlan: str | None = None
    createdAt: datetime


class ControlCircleCreateRequest(BaseModel):
    userId: int = Field(..., ge=1)
    context: str | None = None
    reflections: str | None = None
    cantControl: list[str] = Field(default_factory=list)
    canInfluence: list[str] = Field(default_factory=list)
    canControl: list[str] = Field(default_factory=list)


class ControlCircleRecord(BaseModel):
    id: int
    userId: int
    context: str | None = None
    reflections: str | None = None
    cantControl: list[str] = Field(default_factory=list)
    canInfluence: list[str] = Field(default_factory=list)
    canControl: list[str] = Field(default_factory=list)
    createdAt: datetime
