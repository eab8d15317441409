"""
Authentication dependencies for FastAPI
Validates bearer JWTs issued by the identity service and extracts the user
"""

from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, status

from storefront.core.config import config
from storefront.core.logger import logger
from storefront.models.user import User


class AuthError(Exception):
    """Custom authentication error"""
    def __init__(self, message: str, status_code: int = 401):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token

    Raises:
        AuthError: If token is invalid or expired
    """
    try:
        return jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("JSON Web Token is expired. Try again")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise AuthError("JSON Web Token is invalid. Try again")


async def get_current_user(
    authorization: Optional[str] = Header(None)
) -> User:
    """
    Dependency to extract and validate current user from JWT token.
    Raises 401 if authentication fails.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please login to access this resource",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1]

    try:
        payload = decode_jwt(token)
    except AuthError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("id") or payload.get("user_id") or payload.get("sub")
    if not user_id:
        logger.warning("Invalid token: Missing user ID")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: Missing user identifier",
        )

    roles = payload.get("roles") or ([payload["role"]] if payload.get("role") else [])
    user = User(
        id=str(user_id),
        name=payload.get("name", ""),
        email=payload.get("email"),
        roles=roles,
    )
    logger.debug(f"Authentication successful for user: {user.id}")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency to require admin role on top of authentication"""
    if not user.is_admin():
        logger.warning(f"Admin access denied for user: {user.id}", user_id=user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return user
