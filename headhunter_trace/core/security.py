from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from headhunter_trace.config import get_settings
from headhunter_trace.core.interfaces import IPasswordHasher, ITokenService

settings = get_settings()

TOKEN_ISSUER = "headhunter-trace"


class PasswordHasher(IPasswordHasher):
    """Bcrypt password hasher."""

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
        except ValueError:
            # Stored hash is not a bcrypt hash
            return False


class JWTService(ITokenService):
    """Issues and validates the access/refresh token pair for a session."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        access_expire_minutes: int = settings.jwt_access_token_expire_minutes,
        refresh_expire_days: int = settings.jwt_refresh_token_expire_days,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._access_ttl = timedelta(minutes=access_expire_minutes)
        self._refresh_ttl = timedelta(days=refresh_expire_days)

    def _encode(self, data: dict[str, Any], ttl: timedelta, token_type: str) -> str:
        claims = data.copy()
        claims.update({
            "exp": datetime.now(timezone.utc) + ttl,
            "iss": TOKEN_ISSUER,
            "type": token_type,
        })
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def create_access_token(self, data: dict[str, Any]) -> str:
        return self._encode(data, self._access_ttl, "access")

    def create_refresh_token(self, data: dict[str, Any]) -> str:
        return self._encode(data, self._refresh_ttl, "refresh")

    def decode_token(self, token: str) -> dict[str, Any] | None:
        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=TOKEN_ISSUER,
            )
        except JWTError:
            return None


# Default instances (overridden in tests through dependency injection)
password_hasher = PasswordHasher()
jwt_service = JWTService()
