from fastapi import APIRouter, HTTPException, status

from red2blue.models.tools import (
    ControlCircleCreateRequest,
    ControlCircleRecord,
    MentalSkillsXCheckCreateRequest,
    MentalSkillsXCheckRecord,
)
from red2blue.services.store import store

router = APIRouter(tags=["Mental Skills Tools"])


@router.post(
    "/mental-skills-xcheck",
    response_model=MentalSkillsXCheckRecord,
    status_code=status.HTTP_201_CREATED,
)
def create_mental_skills_xcheck(payload: MentalSkillsXCheckCreateRequest) -> MentalSkillsXCheckRecord:
    xcheck = store.create_mental_skills_xcheck(
        user_id=payload.userId,
        intensity_scores=payload.intensityScores,
        decision_making_scores=payload.decisionMakingScores,
        diversions_scores=payload.diversionsScores,
        execution_scores=payload.executionScores,
        context=payload.context,
        what_did_well=payload.whatDidWell,
        what_could_do_better=payload.whatCouldDoBetter,
        action_plan=payload.actionPlan,
    )
    return MentalSkillsXCheckRecord(**xcheck)


@router.get("/mental-skills-xcheck/latest/{userId}", response_model=MentalSkillsXCheckRecord)
def get_latest_mental_skills_xcheck(userId: int) -> MentalSkillsXCheckRecord:
    xcheck = store.get_latest_mental_skills_xcheck(userId)
    if xcheck is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No x-check found")
    return MentalSkillsXCheckRecord(**xcheck)


@router.get("/mental-skills-xcheck/{userId}", response_model=list[MentalSkillsXCheckRecord])
def get_mental_skills_xchecks(userId: int) -> list[MentalSkillsXCheckRecord]:
    return [MentalSkillsXCheckRecord(**item) for item in store.get_user_mental_skills_xchecks(userId)]


@router.post("/control-circles", response_model=ControlCircleRecord, status_code=status.HTTP_201_CREATED)
def create_control_circle(payload: ControlCircleCreateRequest) -> ControlCircleRecord:
    circle = store.create_control_circle(
        user_id=payload.userId,
        context=payload.context,
        reflections=payload.reflections,
        cant_control=payload.cantControl,
        can_influence=payload.canInfluence,
        can_control=payload.canControl,
    )
    return ControlCircleRecord(**circle)


@router.get("/control-circles/latest/{userId}", response_model=ControlCircleRecord)
def get_latest_control_circle(userId: int) -> ControlCircleRecord:
    circle = store.get_latest_control_circle(userId)
    if circle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No control circle found")
    return ControlCircleRecord(**circle)


@router.get("/control-circles/{userId}", response_model=list[ControlCircleRecord])
def get_control_circles(userId: int) -> list[ControlCircleRecord]:
    return [ControlCircleRecord(**item) for item in store.get_user_control_circles(userId)]
