from typing import Literal

from pydantic import BaseModel, Field

UserRole = Literal["student", "coach", "admin"]
SubscriptionTier = Literal["free", "premium", "ultimate"]


class AuthRegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64)
    email: str | None = Field(default=None, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    bio: str | None = Field(default=None, max_length=2000)
    golfHandicap: float | None = Field(default=None, ge=-10, le=54)
    dexterity: Literal["left", "right"] | None = None


class AuthLoginRequest(BaseModel):
    # Accepts either the username or the email address.
    login: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)


class AuthUser(BaseModel):
    id: int
    username: str
    email: str | None = None
    role: UserRole = "student"
    subscriptionTier: SubscriptionTier = "free"
    isSubscribed: bool = False
    bio: str | None = None
    golfHandicap: float | None = None
    dexterity: str | None = None


class AuthResponse(BaseModel):
    tokenType: str = "bearer"
    accessToken: str
    expiresIn: int
    user: AuthUser


class AdminUserUpdateRequest(BaseModel):
    role: UserRole | None = None
    subscriptionTier: SubscriptionTier | None = None
    isSubscribed: bool | None = None
