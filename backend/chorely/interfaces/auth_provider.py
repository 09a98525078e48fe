"""
Authentication provider interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated user as seen by the API layer."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class IAuthProvider(ABC):
    """Abstract interface for bearer-token authentication."""

    @abstractmethod
    async def verify_token(self, token: str) -> User:
        """Validate a bearer token and return the user it belongs to."""
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        """Look up a user by id."""
        pass
