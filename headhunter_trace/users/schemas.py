from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from headhunter_trace.users.model import Plan, UserRole


class UserBase(BaseModel):
    email: EmailStr
    full_name: str


class ProfileResponse(BaseModel):
    """Credit profile attached to an account."""
    plan: Plan = Plan.FREE
    credits_remaining: int = 0


class UserResponse(UserBase):
    id: str
    role: str = UserRole.USER.value
    is_active: bool
    profile: ProfileResponse
    created_at: datetime

    class Config:
        from_attributes = True


class PlanUpdateRequest(BaseModel):
    plan: Plan


class CreditsUpdateRequest(BaseModel):
    credits_remaining: int = Field(ge=0)


def user_to_response(user: dict[str, Any]) -> UserResponse:
    """Convert a user document to UserResponse."""
    return UserResponse(
        id=str(user["_id"]),
        email=user["email"],
        full_name=user["full_name"],
        role=user.get("role", UserRole.USER.value),
        is_active=user.get("is_active", True),
        profile=ProfileResponse(
            plan=user.get("plan", Plan.FREE.value),
            credits_remaining=user.get("credits_remaining", 0),
        ),
        created_at=user["created_at"],
    )
