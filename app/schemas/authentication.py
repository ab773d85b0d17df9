"""Pydantic schemas for the login endpoint."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email.")
    password: str = Field(..., description="Account password.")


class LoginResponse(BaseModel):
    """Authenticated user plus a bearer token."""

    user_id: str = Field(..., description="Id of the authenticated user.")
    email: str = Field(..., description="Account email.")
    name: str = Field(..., description="Display name.")
    token: str = Field(..., description="Signed JWT access token.")
