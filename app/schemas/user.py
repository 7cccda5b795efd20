"""User schemas for API validation."""
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional


class UserCreate(BaseModel):
    """Schema for user signup."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    display_name: str = Field(..., min_length=1, max_length=100)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Schema for user profile response."""
    id: int
    email: str
    display_name: Optional[str]
    preferred_currency: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """Schema for display name changes."""
    display_name: str = Field(..., min_length=1, max_length=100)


class CurrencyUpdate(BaseModel):
    """Schema for preferred currency changes."""
    preferred_currency: str = Field(..., min_length=2, max_length=16)


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Schema for token payload data."""
    user_id: Optional[int] = None
    jti: Optional[str] = None
    expires_at: Optional[datetime] = None
