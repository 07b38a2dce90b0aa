"""
Authentication dependencies.

Every workflow route depends on ``get_current_principal``; the services never
read identity from anywhere else.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from hr_workflow.database import get_database
from hr_workflow.models.user import Principal
from hr_workflow.services.auth_service import AuthService
from hr_workflow.utils.auth import verify_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """User ID from the bearer token; 401 when missing, invalid or expired."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        return verify_access_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("Invalid authentication credentials")


async def get_current_principal(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
) -> Principal:
    """
    Resolve the authenticated principal.

    Role and department are re-read from the user record on every request,
    so a role change takes effect without issuing a new token.

    Raises:
        HTTPException: If the user no longer exists or is inactive (401)
    """
    try:
        return await AuthService(db).get_principal(user_id)
    except ValueError:
        raise _unauthorized("Invalid session or user not active")
