from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from red2blue.errors import NotFoundError
from red2blue.models.catalog import (
    PreShotRoutineCreateRequest,
    PreShotRoutineRecord,
    PreShotRoutineUpdateRequest,
    ScenarioRecord,
    TechniqueRecord,
)
from red2blue.services.store import store

router = APIRouter(tags=["Catalog"])


@router.get("/techniques", response_model=list[TechniqueRecord])
def list_techniques(category: str | None = Query(default=None)) -> list[TechniqueRecord]:
    techniques = store.get_techniques_by_category(category) if category else store.list_techniques()
    return [TechniqueRecord(**item) for item in techniques]


@router.get("/scenarios", response_model=list[ScenarioRecord])
def list_scenarios(
    pressureLevel: Literal["low", "medium", "high"] | None = Query(default=None),
) -> list[ScenarioRecord]:
    scenarios = store.get_scenarios_by_pressure_level(pressureLevel) if pressureLevel else store.list_scenarios()
    return [ScenarioRecord(**item) for item in scenarios]


@router.post("/pre-shot-routines", response_model=PreShotRoutineRecord, status_code=status.HTTP_201_CREATED)
def create_pre_shot_routine(payload: PreShotRoutineCreateRequest) -> PreShotRoutineRecord:
    routine = store.create_pre_shot_routine(
        user_id=payload.userId,
        name=payload.name,
        steps=[step.model_dump() for step in payload.steps],
        is_active=payload.isActive,
    )
    return PreShotRoutineRecord(**routine)


@router.get("/pre-shot-routines/active/{userId}", response_model=PreShotRoutineRecord)
def get_active_pre_shot_routine(userId: int) -> PreShotRoutineRecord:
    routine = store.get_active_pre_shot_routine(userId)
    if routine is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active pre-shot routine")
    return PreShotRoutineRecord(**routine)


@router.get("/pre-shot-routines/{userId}", response_model=list[PreShotRoutineRecord])
def get_pre_shot_routines(userId: int) -> list[PreShotRoutineRecord]:
    return [PreShotRoutineRecord(**item) for item in store.get_user_pre_shot_routines(userId)]


@router.patch("/pre-shot-routines/{routineId}", response_model=PreShotRoutineRecord)
def update_pre_shot_routine(routineId: int, payload: PreShotRoutineUpdateRequest) -> PreShotRoutineRecord:
    try:
        routine = store.update_pre_shot_routine(routineId, payload.model_dump(exclude_none=True))
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return PreShotRoutineRecord(**routine)
