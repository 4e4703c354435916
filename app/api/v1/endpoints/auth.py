from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core import security
from app.core.exceptions import AuthenticationError
from app.services.user_service import UserService
from app.schemas.auth import AccessToken, LoginRequest, RefreshRequest, RegisterRequest, Token
from app.schemas.responses import SuccessResponse
from app.schemas.user import UserResponse

router = APIRouter()


def _issue_tokens(user_id: str) -> Token:
    return Token(
        access_token=security.create_access_token(data={"sub": user_id}),
        refresh_token=security.create_refresh_token(data={"sub": user_id}),
        token_type="bearer",
        user_id=user_id,
    )


@router.post("/register", response_model=SuccessResponse[UserResponse])
async def register(
    register_in: RegisterRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Create an account (full name, email, password).
    """
    user = await UserService.create_user(
        db,
        email=register_in.email,
        password=register_in.password,
        full_name=register_in.full_name,
    )
    return SuccessResponse(data=user, message="Account created successfully")


@router.post("/login", response_model=SuccessResponse[Token])
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Email/password login. Returns JWT access and refresh tokens.
    """
    user = await UserService.authenticate_user(db, email=login_data.email, password=login_data.password)
    if not user:
        raise AuthenticationError("Incorrect email or password")

    return SuccessResponse(data=_issue_tokens(str(user.id)), message="Login successful")


@router.post("/refresh", response_model=SuccessResponse[AccessToken])
async def refresh_token(
    refresh_in: RefreshRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Exchange a refresh token for a new access token.
    """
    payload = security.decode_token(refresh_in.refresh_token, expected_type="refresh")
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Invalid refresh token")

    try:
        user = await UserService.get_user_by_id(db, UUID(payload["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid refresh token")
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return SuccessResponse(
        data=AccessToken(access_token=security.create_access_token(data={"sub": str(user.id)})),
        message="Token refreshed",
    )
