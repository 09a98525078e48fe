"""
Local password authentication provider.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from chorely.core.config import Settings
from chorely.core.exceptions import AuthenticationError
from chorely.core.security import decode_access_token
from chorely.interfaces.auth_provider import IAuthProvider, User
from chorely.interfaces.user_repository import IUserRepository
from chorely.models.user import UserAccount


def _to_user(account: UserAccount) -> User:
    return User(id=str(account.id), email=account.email, name=account.name)


class LocalAuthProvider(IAuthProvider):
    """Local auth provider with HMAC JWT validation."""

    def __init__(self, settings: Settings, user_repo: IUserRepository):
        if not settings.JWT_SECRET:
            raise ValueError("JWT_SECRET must be set for local auth")
        self._settings = settings
        self._user_repo = user_repo

    async def verify_token(self, token: str) -> User:
        subject = decode_access_token(token, self._settings)
        user = await self.get_user(subject)
        if not user:
            raise AuthenticationError("User not found")
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        try:
            account_id = UUID(user_id)
        except ValueError:
            return None
        account = await self._user_repo.get(account_id)
        return _to_user(account) if account else None
