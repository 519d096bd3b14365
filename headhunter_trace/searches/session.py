"""Explicit caller session passed through the search flow."""

from dataclasses import dataclass
from typing import Any

from headhunter_trace.core.interfaces import IUserRepository
from headhunter_trace.users.model import Plan


@dataclass
class Profile:
    """Credit profile of the caller (read-only to the search flow)."""

    credits_remaining: int = 0
    plan: Plan = Plan.FREE

    @classmethod
    def from_user(cls, user: dict[str, Any]) -> "Profile":
        return cls(
            credits_remaining=int(user.get("credits_remaining", 0) or 0),
            plan=Plan(user.get("plan", Plan.FREE.value)),
        )


class SearchSession:
    """The caller's ``{user, profile}`` pair with an explicit refresh."""

    def __init__(self, user: dict[str, Any], user_repository: IUserRepository) -> None:
        self.user = user
        self.profile = Profile.from_user(user)
        self._user_repository = user_repository

    @property
    def user_id(self) -> str:
        return str(self.user["_id"])

    async def refresh(self) -> Profile:
        """Re-read the profile from storage after a balance change."""
        user = await self._user_repository.get_by_id(self.user_id)
        if user is not None:
            self.user = user
            self.profile = Profile.from_user(user)
        return self.profile
