from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class TechniqueRecord(BaseModel):
    id: int
    name: str
    category: str
    description: str
    instructions: str
    duration: int | None = None
    difficulty: str


class ScenarioRecord(BaseModel):
    id: int
    title: str
    description: str
    pressureLevel: Literal["low", "medium", "high"]
    category: str
    redHeadTriggers: list[str] = Field(default_factory=list)
    blueHeadTechniques: list[str] = Field(default_factory=list)


class RoutineStep(BaseModel):
    name: str = Field(..., min_length=1)
    duration: int = Field(..., ge=0)
    description: str = ""


class PreShotRoutineCreateRequest(BaseModel):
    userId: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=128)
    steps: list[RoutineStep] = Field(..., min_length=1)
    isActive: bool = True


class PreShotRoutineRecord(BaseModel):
    id: int
    userId: int
    name: str
    steps: list[RoutineStep]
    totalDuration: int
    isActive: bool
    createdAt: datetime


class PreShotRoutineUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    steps: list[RoutineStep] | None = Field(default=None, min_length=1)
    isActive: bool | None = None
