"""
Authentication schemas for FastAPI.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    """Schema for registering a user."""
    email: EmailStr
    password: str
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=150)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        return v


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    """Schema for updating profile information."""
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=150)


class UserResponse(BaseModel):
    """Schema for user response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    name: Optional[str] = None
    age: Optional[int] = None
    created_at: Optional[datetime] = None


class Token(BaseModel):
    """Schema for access token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthResponse(BaseModel):
    """Schema for register/login payloads."""
    user: UserResponse
    token: Token
