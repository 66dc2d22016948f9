from fastapi import APIRouter, HTTPException, status

from red2blue.errors import InvalidInputError
from red2blue.models.assessment import (
    AssessmentRecord,
    AssessmentSubmitRequest,
    AssessmentSubmitResponse,
)
from red2blue.services.assessment_analyzer import assessment_analyzer
from red2blue.services.engagement import track_engagement
from red2blue.services.store import store

router = APIRouter(prefix="/assessments", tags=["Assessments"])


@router.post("", response_model=AssessmentSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_assessment(payload: AssessmentSubmitRequest) -> AssessmentSubmitResponse:
    try:
        result = assessment_analyzer.submit_assessment(
            payload.userId,
            payload.model_dump(exclude={"userId"}),
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    track_engagement(payload.userId, assessments_completed=1)
    return AssessmentSubmitResponse(
        assessment=AssessmentRecord(**result["assessment"]),
        analysis=result["analysis"],
    )


@router.get("/latest/{userId}", response_model=AssessmentRecord)
def get_latest_assessment(userId: int) -> AssessmentRecord:
    assessment = store.get_latest_assessment(userId)
    if assessment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No assessment found")
    return AssessmentRecord(**assessment)


@router.get("/user/{userId}", response_model=list[AssessmentRecord])
def get_user_assessments(userId: int) -> list[AssessmentRecord]:
    return [AssessmentRecord(**item) for item in store.get_user_assessments(userId)]
