from fastapi import APIRouter, Depends, HTTPException, status

from red2blue.api.security import get_current_user
from red2blue.errors import InvalidInputError
from red2blue.models.auth import AuthLoginRequest, AuthRegisterRequest, AuthResponse, AuthUser
from red2blue.services.auth_service import access_expires_in_seconds, create_access_token
from red2blue.services.store import store

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: AuthRegisterRequest) -> AuthResponse:
    try:
        user = store.create_user(
            username=payload.username,
            password=payload.password,
            email=payload.email,
            bio=payload.bio,
            golf_handicap=payload.golfHandicap,
            dexterity=payload.dexterity,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(payload: AuthLoginRequest) -> AuthResponse:
    user = store.authenticate_user(payload.login, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _auth_response(user)


@router.get("/me", response_model=AuthUser)
def me(current_user: dict = Depends(get_current_user)) -> AuthUser:
    return AuthUser(**current_user)


def _auth_response(user: dict) -> AuthResponse:
    token, _ = create_access_token(user_id=user["id"], role=user["role"])
    return AuthResponse(
        tokenType="bearer",
        accessToken=token,
        expiresIn=access_expires_in_seconds(),
        user=AuthUser(**user),
    )
