"""Admin authentication schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AdminCredentials(BaseModel):
    """Email and password pair used for login and admin creation."""

    email: str = Field(description="Admin email address")
    password: str = Field(description="Plain-text password")


class LoginResponse(BaseModel):
    """Structured login outcome.

    Failed credentials are reported with ``success=False`` rather than an
    error status, so callers can tell them apart from system failures.
    """

    model_config = ConfigDict(from_attributes=True)

    success: bool = Field(description="Whether the credentials matched")
    email: str | None = Field(default=None, description="Normalised email on success")
    error: str | None = Field(default=None, description="Failure reason")


class CreateAdminResponse(BaseModel):
    """Result of creating an admin user."""

    id: str
    email: str
    action: Literal["created"] = "created"


class HasAdminsResponse(BaseModel):
    """Whether any admin account exists yet."""

    model_config = ConfigDict(populate_by_name=True)

    has_admins: bool = Field(alias="hasAdmins", description="True once an admin has been created")
