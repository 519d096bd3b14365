from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from motor.motor_asyncio import AsyncIOMotorDatabase

from headhunter_trace.config import get_settings
from headhunter_trace.database import get_database
from headhunter_trace.users.repository import UserRepository
from headhunter_trace.core.security import password_hasher, jwt_service
from headhunter_trace.auth.service import AuthService
from headhunter_trace.auth.exceptions import InvalidTokenError, UserDeactivatedError

security = HTTPBearer()


def get_user_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> UserRepository:
    """Dependency injection for UserRepository."""
    return UserRepository(db)


def get_auth_service(
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> AuthService:
    """Dependency injection for AuthService."""
    return AuthService(
        user_repository=user_repository,
        password_hasher=password_hasher,
        jwt_service=jwt_service,
        free_plan_credits=get_settings().free_plan_credits,
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict:
    """Dependency to get current authenticated user."""
    try:
        return await auth_service.get_current_user(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except UserDeactivatedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been deactivated",
        )
