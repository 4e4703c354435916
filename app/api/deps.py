"""API Dependencies"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.core.exceptions import AuthenticationError
from app.core.security import decode_token
from app.database import get_db
from app.models.user import User
from app.services.payment_service import RazorpayGateway, get_payment_gateway
from app.services.user_service import UserService

__all__ = ["get_db", "get_current_user", "get_payment_gateway", "RazorpayGateway"]

# Security scheme for bearer token
security = HTTPBearer()


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """
    Get current authenticated user from JWT token.

    The returned user's id is the owner scope passed into every bill operation.

    Raises:
        AuthenticationError: If token is invalid or user not found / inactive
    """
    payload = decode_token(credentials.credentials, expected_type="access")
    if not payload:
        raise AuthenticationError()

    user_id_str: Optional[str] = payload.get("sub")
    if not user_id_str:
        raise AuthenticationError()

    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise AuthenticationError("Invalid user ID")

    user = await UserService.get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return user
