"""
Authentication API endpoints.
"""
from fastapi import APIRouter, Depends, status

from sympcheck.dependencies import get_auth_service, get_current_user
from sympcheck.models.user import User
from sympcheck.schemas.auth import AuthResponse, UserCreate, UserLogin, UserResponse, UserUpdate
from sympcheck.schemas.common import success
from sympcheck.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new user and issue a token."""
    user = auth_service.register(
        email=user_data.email,
        password=user_data.password,
        name=user_data.name,
        age=user_data.age,
    )

    response = AuthResponse(
        user=UserResponse.model_validate(user),
        token=auth_service.issue_token(user),
    )
    return success(data=response.model_dump(mode="json"), message="User registered successfully")


@router.post("/login")
async def login(
    credentials: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Exchange email and password for a token."""
    user = auth_service.authenticate(credentials.email, credentials.password)

    response = AuthResponse(
        user=UserResponse.model_validate(user),
        token=auth_service.issue_token(user),
    )
    return success(data=response.model_dump(mode="json"), message="Login successful")


@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get the current user's profile."""
    return success(data={"user": UserResponse.model_validate(current_user).model_dump(mode="json")})


@router.put("/profile")
async def update_profile(
    update: UserUpdate,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Update the current user's name or age."""
    user = auth_service.update_profile(current_user, name=update.name, age=update.age)
    return success(
        data={"user": UserResponse.model_validate(user).model_dump(mode="json")},
        message="Profile updated successfully",
    )
