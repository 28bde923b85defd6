"""User request/response schemas - API contract and validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=64)
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class UserCreate(UserBase):
    # bcrypt accepts max 72 bytes; longer passwords cause 500. Validate here for clear 422.
    password: str = Field(..., min_length=1, max_length=72)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int


class ProfileUpdate(BaseModel):
    """Identity fields only; points and flags are never client-editable."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = None
    profile_image: str | None = None


class UserPublic(BaseModel):
    """What other users may see."""

    id: int
    username: str
    first_name: str
    last_name: str
    profile_image: str | None = None
    rating: int

    model_config = {"from_attributes": True}


class UserResponse(UserBase):
    id: int
    bio: str | None = None
    profile_image: str | None = None
    points_balance: int
    rating: int
    is_admin: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
