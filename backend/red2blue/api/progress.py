from fastapi import APIRouter, Depends, Query, status

from red2blue.api.security import ensure_can_access, get_current_user
from red2blue.coaching.adapter import coaching_adapter
from red2blue.models.progress import (
    EngagementMetricRecord,
    EngagementResponse,
    PersonalizedPlan,
    PlanRequest,
    ProgressCreateRequest,
    ProgressRecord,
)
from red2blue.services.engagement import track_engagement
from red2blue.services.store import store

router = APIRouter(tags=["Progress"])


@router.post("/progress", response_model=ProgressRecord, status_code=status.HTTP_201_CREATED)
def create_progress(payload: ProgressCreateRequest) -> ProgressRecord:
    progress = store.create_user_progress(
        user_id=payload.userId,
        overall_score=payload.overallScore,
        red_head_instances=payload.redHeadInstances,
        blue_head_instances=payload.blueHeadInstances,
        techniques_used=payload.techniquesUsed,
        progress_date=payload.date,
    )
    if payload.techniquesUsed or payload.practiceMinutes:
        track_engagement(
            payload.userId,
            techniques_practiced=len(payload.techniquesUsed),
            session_minutes=payload.practiceMinutes,
        )
    return ProgressRecord(**progress)


@router.get("/progress/{userId}", response_model=list[ProgressRecord])
def get_progress(userId: int, days: int = Query(default=7, ge=0, le=365)) -> list[ProgressRecord]:
    return [ProgressRecord(**item) for item in store.get_user_progress(userId, days=days)]


@router.get("/engagement/{userId}", response_model=EngagementResponse)
def get_engagement(
    userId: int,
    days: int = Query(default=30, ge=0, le=365),
    current_user: dict = Depends(get_current_user),
) -> EngagementResponse:
    ensure_can_access(current_user, userId)
    metrics = store.get_user_engagement_metrics(userId, days=days)
    return EngagementResponse(metrics=[EngagementMetricRecord(**item) for item in metrics])


@router.post("/generate-plan/{userId}", response_model=PersonalizedPlan)
def generate_plan(userId: int, payload: PlanRequest | None = None) -> PersonalizedPlan:
    assessments = store.get_user_assessments(userId, limit=5)
    progress = store.get_user_progress(userId, days=30)
    goals = payload.goals if payload else []
    return coaching_adapter.generate_personalized_plan(assessments, progress, goals)
