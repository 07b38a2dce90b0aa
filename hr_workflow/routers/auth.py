"""Auth router - registration, login and the current user."""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from hr_workflow.database import get_database
from hr_workflow.dependencies import get_current_user_id
from hr_workflow.models.user import User, UserCreate
from hr_workflow.services.auth_service import AuthService


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    """Login request model."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Token response model."""

    access_token: str
    token_type: str = "bearer"


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db=Depends(get_database)):
    """
    Register an employee or manager.

    - 400 if the email or employee ID is taken
    - 422 for an unknown role or a password under six characters
    """
    try:
        return await AuthService(db).register_user(user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/login", response_model=TokenResponse)
async def login(login_req: LoginRequest, db=Depends(get_database)):
    """Exchange email and password for a bearer token (401 on failure)."""
    try:
        token = await AuthService(db).login(email=login_req.email, password=login_req.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return TokenResponse(access_token=token)


@router.get("/me", response_model=User)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Profile of the authenticated user."""
    try:
        return await AuthService(db).get_user_by_id(user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
