from fastapi import APIRouter, Depends, HTTPException, status

from red2blue.api.security import require_admin, require_coach
from red2blue.errors import NotFoundError
from red2blue.models.auth import AdminUserUpdateRequest, AuthUser
from red2blue.models.coach import StudentDetail, StudentSummary
from red2blue.services.coach_dashboard import coach_dashboard
from red2blue.services.store import store

router = APIRouter(tags=["Coach"])


@router.get("/coach/students", response_model=list[StudentSummary])
def list_students(_: dict = Depends(require_coach)) -> list[StudentSummary]:
    return [StudentSummary(**summary) for summary in coach_dashboard.list_student_summaries()]


@router.get("/coach/student-detail/{userId}", response_model=StudentDetail)
def get_student_detail(userId: int, _: dict = Depends(require_coach)) -> StudentDetail:
    try:
        detail = coach_dashboard.get_student_detail(userId)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return StudentDetail(**detail)


@router.patch("/admin/users/{userId}", response_model=AuthUser)
def update_user(userId: int, payload: AdminUserUpdateRequest, _: dict = Depends(require_admin)) -> AuthUser:
    try:
        user = store.update_user(userId, payload.model_dump(exclude_none=True))
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return AuthUser(**user)
