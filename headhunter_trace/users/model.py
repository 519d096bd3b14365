from datetime import datetime, timezone
from enum import Enum
from typing import Any


class UserRole(str, Enum):
    """User roles for authorization."""
    USER = "user"
    ADMIN = "admin"


class Plan(str, Enum):
    """Subscription plans. Each one grants a fixed allotment of search credits."""
    FREE = "free"
    PREMIUM_BASIC = "premium_basic"
    PREMIUM_PRO = "premium_pro"
    ENTERPRISE = "enterprise"


# Enterprise is sold as "unlimited"; a large monthly allotment keeps the
# one-credit-per-search rule uniform across plans.
PLAN_CREDITS: dict[Plan, int] = {
    Plan.PREMIUM_BASIC: 20,
    Plan.PREMIUM_PRO: 100,
    Plan.ENTERPRISE: 10_000,
}


def credits_for_plan(plan: Plan, free_credits: int) -> int:
    """Credit allotment granted when an account moves to ``plan``."""
    if plan == Plan.FREE:
        return free_credits
    return PLAN_CREDITS[plan]


def create_user_document(
    email: str,
    hashed_password: str,
    full_name: str,
    credits_remaining: int,
    role: UserRole = UserRole.USER,
    plan: Plan = Plan.FREE,
) -> dict[str, Any]:
    """Create a user document (account plus credit profile) for MongoDB insertion."""
    now = datetime.now(timezone.utc)
    return {
        "email": email,
        "hashed_password": hashed_password,
        "full_name": full_name,
        "role": role.value,
        "plan": plan.value,
        "credits_remaining": max(0, credits_remaining),
        "is_active": True,
        "created_at": now,
        "updated_at": now,
    }
