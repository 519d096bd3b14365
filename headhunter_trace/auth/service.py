import logging
from typing import Any

from headhunter_trace.core.interfaces import IPasswordHasher, ITokenService, IUserRepository
from headhunter_trace.users.model import create_user_document, UserRole, Plan
from headhunter_trace.auth.exceptions import (
    UserAlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserDeactivatedError,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login and token handling."""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_service: ITokenService,
        free_plan_credits: int = 3,
    ) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._jwt_service = jwt_service
        self._free_plan_credits = free_plan_credits

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
    ) -> dict[str, Any]:
        """Register a new user on the free plan. The first user becomes admin."""
        existing_user = await self._user_repository.get_by_email(email)
        if existing_user:
            raise UserAlreadyExistsError(email)

        is_first_user = await self._user_repository.count() == 0

        user_document = create_user_document(
            email=email,
            hashed_password=self._password_hasher.hash(password),
            full_name=full_name,
            credits_remaining=self._free_plan_credits,
            role=UserRole.ADMIN if is_first_user else UserRole.USER,
            plan=Plan.FREE,
        )

        user = await self._user_repository.create(user_document)
        logger.info(f"Registered user {user['_id']} with {self._free_plan_credits} credits")
        return user

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Authenticate user and return tokens."""
        user = await self._user_repository.get_by_email(email)
        if not user:
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user["hashed_password"]):
            raise InvalidCredentialsError()

        if not user.get("is_active", True):
            raise UserDeactivatedError()

        user_id = str(user["_id"])
        return {
            "access_token": self._jwt_service.create_access_token({"sub": user_id}),
            "refresh_token": self._jwt_service.create_refresh_token({"sub": user_id}),
            "token_type": "bearer",
        }

    async def refresh_token(self, refresh_token: str) -> dict[str, Any]:
        """Generate new access token from refresh token."""
        user = await self._user_from_token(refresh_token, "refresh")
        return {
            "access_token": self._jwt_service.create_access_token({"sub": str(user["_id"])}),
            "token_type": "bearer",
        }

    async def get_current_user(self, access_token: str) -> dict[str, Any]:
        """Get current user from access token."""
        user = await self._user_from_token(access_token, "access")
        if not user.get("is_active", True):
            raise UserDeactivatedError()
        return user

    async def _user_from_token(self, token: str, token_type: str) -> dict[str, Any]:
        payload = self._jwt_service.decode_token(token)
        if not payload:
            raise InvalidTokenError()

        if payload.get("type") != token_type:
            raise InvalidTokenError("Invalid token type")

        user = await self._user_repository.get_by_id(payload.get("sub"))
        if not user:
            raise InvalidTokenError("User not found")
        return user
