"""Pydantic schemas for user requests and responses."""

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    """Body of the user registration request."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name.")
    email: EmailStr = Field(..., description="Unique login email.")
    password: str = Field(..., min_length=6, max_length=32, description="Plain-text password.")
    password_confirm: str = Field(..., description="Must repeat password exactly.")


class UserUpdate(BaseModel):
    """Body of the user update request."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name.")
    email: EmailStr = Field(..., description="Unique login email.")


class PasswordChange(BaseModel):
    """Body of the change-password request."""

    password_old: str = Field(..., description="Current password.")
    password_new: str = Field(..., min_length=6, max_length=32, description="New password.")
    password_confirm: str = Field(..., description="Must repeat password_new exactly.")


class UserRead(BaseModel):
    """Public representation of a stored user (no password hash)."""

    id: str
    name: str | None = None
    email: str | None = None


class UserUpdated(BaseModel):
    id: str
    name: str


class UserDeleted(BaseModel):
    id: str


class PasswordChanged(BaseModel):
    id: str
