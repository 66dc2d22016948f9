from fastapi import APIRouter, Depends, HTTPException, Query, status

from red2blue.api.security import ensure_can_access, get_current_user
from red2blue.errors import InvalidInputError, NotFoundError
from red2blue.models.recommendation import (
    CoachingInsightRecord,
    CoachingProfileRecord,
    CoachingProfileRequest,
    CoachingProfileResponse,
    InsightListResponse,
    RecommendationFeedbackRequest,
    RecommendationListResponse,
    RecommendationRecord,
)
from red2blue.services.recommendation_engine import recommendation_engine
from red2blue.services.store import store

router = APIRouter(tags=["Recommendations"])


@router.get("/recommendations/{userId}", response_model=RecommendationListResponse)
def generate_recommendations(
    userId: int,
    current_user: dict = Depends(get_current_user),
) -> RecommendationListResponse:
    ensure_can_access(current_user, userId)
    try:
        recommendations = recommendation_engine.generate_personalized_recommendations(userId)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return RecommendationListResponse(recommendations=[RecommendationRecord(**item) for item in recommendations])


@router.get("/recommendations/{userId}/stored", response_model=RecommendationListResponse)
def get_stored_recommendations(
    userId: int,
    active: bool | None = Query(default=None),
    current_user: dict = Depends(get_current_user),
) -> RecommendationListResponse:
    ensure_can_access(current_user, userId)
    recommendations = store.get_user_recommendations(userId, active=active)
    return RecommendationListResponse(recommendations=[RecommendationRecord(**item) for item in recommendations])


@router.post("/recommendations/{recommendationId}/feedback", response_model=RecommendationRecord)
def submit_recommendation_feedback(
    recommendationId: int,
    payload: RecommendationFeedbackRequest,
    current_user: dict = Depends(get_current_user),
) -> RecommendationRecord:
    recommendation = store.get_ai_recommendation(recommendationId)
    if recommendation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recommendation not found")
    ensure_can_access(current_user, recommendation["userId"])
    try:
        updated = recommendation_engine.track_recommendation_effectiveness(
            recommendationId,
            payload.feedback,
            payload.comments,
            payload.effectivenessMeasure,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return RecommendationRecord(**updated)


@router.get("/insights/{userId}", response_model=InsightListResponse)
def get_insights(
    userId: int,
    acknowledged: bool | None = Query(default=None),
    current_user: dict = Depends(get_current_user),
) -> InsightListResponse:
    ensure_can_access(current_user, userId)
    insights = store.get_user_insights(userId, acknowledged=acknowledged)
    return InsightListResponse(insights=[CoachingInsightRecord(**item) for item in insights])


@router.post("/insights/{insightId}/acknowledge", response_model=CoachingInsightRecord)
def acknowledge_insight(insightId: int, current_user: dict = Depends(get_current_user)) -> CoachingInsightRecord:
    insight = store.get_coaching_insight(insightId)
    if insight is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Insight not found")
    ensure_can_access(current_user, insight["userId"])
    return CoachingInsightRecord(**store.acknowledge_insight(insightId))


@router.get("/coaching-profile/{userId}", response_model=CoachingProfileResponse)
def get_coaching_profile(userId: int, current_user: dict = Depends(get_current_user)) -> CoachingProfileResponse:
    ensure_can_access(current_user, userId)
    profile = store.get_coaching_profile(userId)
    return CoachingProfileResponse(profile=CoachingProfileRecord(**profile) if profile else None)


@router.post("/coaching-profile/{userId}", response_model=CoachingProfileResponse)
def update_coaching_profile(
    userId: int,
    payload: CoachingProfileRequest,
    current_user: dict = Depends(get_current_user),
) -> CoachingProfileResponse:
    ensure_can_access(current_user, userId)
    if store.get_user(userId) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    profile = store.upsert_coaching_profile(userId, payload.model_dump(exclude_none=True))
    return CoachingProfileResponse(profile=CoachingProfileRecord(**profile))
