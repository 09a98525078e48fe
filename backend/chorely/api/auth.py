"""
Local authentication endpoints (register/login).
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from chorely.api.deps import CurrentUser, UserRepo
from chorely.core.config import Settings, get_settings
from chorely.core.exceptions import DuplicateError
from chorely.core.security import (
    create_access_token,
    hash_password,
    is_valid_email,
    normalize_email,
    password_problems,
    verify_password,
)
from chorely.interfaces.auth_provider import User
from chorely.models.user import UserAccount, UserCreate

router = APIRouter()


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AuthUser


def _auth_response(user: UserAccount, settings: Settings) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(str(user.id), settings),
        user=AuthUser(id=str(user.id), email=user.email, name=user.name),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    user_repo: UserRepo,
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    name = data.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required",
        )
    email = normalize_email(data.email)
    if not is_valid_email(email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email address",
        )

    problems = password_problems(data.password, settings.PASSWORD_MIN_LENGTH)
    if problems:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Password requirements not met", "errors": problems},
        )

    existing_email = await user_repo.get_by_email(email)
    if existing_email:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        )

    try:
        user = await user_repo.create(
            UserCreate(
                email=email,
                name=name,
                password_hash=hash_password(
                    data.password, iterations=settings.PASSWORD_HASH_ITERATIONS
                ),
            )
        )
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    return _auth_response(user, settings)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    user_repo: UserRepo,
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    user = await user_repo.get_by_email(normalize_email(data.email))
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return _auth_response(user, settings)


@router.get("/me", response_model=User)
async def me(user: CurrentUser) -> User:
    return user
