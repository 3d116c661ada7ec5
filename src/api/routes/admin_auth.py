"""Admin authentication API routes."""

from fastapi import APIRouter, status

from src.schemas.admin_auth import (
    AdminCredentials,
    CreateAdminResponse,
    HasAdminsResponse,
    LoginResponse,
)
from src.services.admin_auth_service import AdminAuthService

router = APIRouter(prefix="/admin", tags=["admin-auth"])


@router.post(
    "/auth/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    summary="Admin login",
    description="Checks admin credentials. Wrong credentials return success=false, not an error status.",
)
async def login(data: AdminCredentials) -> LoginResponse:
    """Log an admin in.

    Args:
        data: Email and password.

    Returns:
        LoginResponse: Success flag with email, or failure reason.
    """
    service = AdminAuthService()
    return LoginResponse(**await service.login(data.email, data.password))


@router.post(
    "/users",
    response_model=CreateAdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create admin",
    description="Creates an admin account with a salted password hash.",
)
async def create_admin(data: AdminCredentials) -> CreateAdminResponse:
    """Create an admin account.

    Args:
        data: Email and password for the new admin.

    Returns:
        CreateAdminResponse: The new admin's id and email.

    Raises:
        ValidationError: 422 on bad email, short password or duplicate email.
    """
    service = AdminAuthService()
    return CreateAdminResponse(**await service.create_admin(data.email, data.password))


@router.get(
    "/users/exists",
    response_model=HasAdminsResponse,
    summary="Check for admins",
    description="Tells the admin panel whether first-time setup is still needed.",
)
async def has_admins() -> HasAdminsResponse:
    service = AdminAuthService()
    return HasAdminsResponse(has_admins=await service.has_admins())
