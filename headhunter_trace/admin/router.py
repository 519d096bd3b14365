import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from headhunter_trace.admin.dependencies import get_current_admin_user
from headhunter_trace.auth.dependencies import get_user_repository
from headhunter_trace.config import get_settings
from headhunter_trace.users.model import credits_for_plan
from headhunter_trace.users.repository import UserRepository
from headhunter_trace.users.schemas import (
    CreditsUpdateRequest,
    PlanUpdateRequest,
    UserResponse,
    user_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="User not found",
    )


@router.get("/users", response_model=list[UserResponse])
async def get_all_users(
    _: Annotated[dict, Depends(get_current_admin_user)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> list[UserResponse]:
    """Get all users with their credit profile (admin only)."""
    users = await user_repository.get_all_users()
    return [user_to_response(user) for user in users]


@router.patch("/users/{user_id}/plan", response_model=UserResponse)
async def update_user_plan(
    user_id: str,
    request: PlanUpdateRequest,
    admin: Annotated[dict, Depends(get_current_admin_user)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserResponse:
    """Move a user to another plan; the balance is reset to the plan's allotment."""
    credits = credits_for_plan(request.plan, get_settings().free_plan_credits)
    user = await user_repository.set_plan(user_id, request.plan, credits)
    if not user:
        raise _not_found()

    logger.info(f"Admin {admin['_id']} moved user {user_id} to plan {request.plan.value}")
    return user_to_response(user)


@router.patch("/users/{user_id}/credits", response_model=UserResponse)
async def update_user_credits(
    user_id: str,
    request: CreditsUpdateRequest,
    admin: Annotated[dict, Depends(get_current_admin_user)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserResponse:
    """Overwrite a user's credit balance (admin only)."""
    user = await user_repository.set_credits(user_id, request.credits_remaining)
    if not user:
        raise _not_found()

    logger.info(
        f"Admin {admin['_id']} set credits of user {user_id} to {request.credits_remaining}"
    )
    return user_to_response(user)


@router.post("/users/{user_id}/toggle-active", response_model=UserResponse)
async def toggle_user_active(
    user_id: str,
    _: Annotated[dict, Depends(get_current_admin_user)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserResponse:
    """Toggle user active status (admin only)."""
    user = await user_repository.get_by_id(user_id)
    if not user:
        raise _not_found()

    new_status = not user.get("is_active", True)
    updated_user = await user_repository.update(user_id, {"is_active": new_status})

    return user_to_response(updated_user)
