"""
Caller identity.

Credential storage, login and token issuance belong to the external
identity service. This module only verifies the bearer token it issues
and turns the claims into a Principal.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

import jwt

from guesthouse.config.settings import Settings
from guesthouse.core.exceptions import AuthenticationError
from guesthouse.core.logging import get_logger
from guesthouse.models.base.enums import UserRole

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""

    user_id: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN


class IdentityProvider(Protocol):
    """Resolves a bearer token into a Principal or raises AuthenticationError."""

    def authenticate(self, token: str) -> Principal:
        ...


class JWTIdentityProvider:
    """
    Verifies HS256 tokens carrying ``sub`` (user id) and ``role`` claims.

    Args:
        secret_key: Shared signing secret
        algorithm: JWT algorithm
        issuer: Expected ``iss`` claim, when configured
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", issuer: Optional[str] = None):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTIdentityProvider":
        return cls(settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM, settings.JWT_ISSUER)

    def authenticate(self, token: str) -> Principal:
        options = {"require": ["sub"]}
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options=options,
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected bearer token", extra={"reason": type(exc).__name__})
            raise AuthenticationError("Invalid authentication token") from exc

        user_id = payload.get("sub")
        role = payload.get("role", UserRole.USER.value)
        try:
            return Principal(user_id=str(user_id), role=UserRole(role))
        except ValueError as exc:
            raise AuthenticationError("Token carries an unknown role") from exc
