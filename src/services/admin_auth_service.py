"""Admin authentication service.

Admins log in with email and password. Passwords are stored as the hex
SHA-256 of ``password + salt`` with a per-user random salt.
"""

import hmac
import logging
import secrets
import time
from hashlib import sha256
from typing import Any

from src.api.middleware.error_handler import ValidationError
from src.core.supabase import ADMIN_USERS_TABLE, get_supabase_client
from src.models.admin_user import AdminUser

logger = logging.getLogger(__name__)

SALT_BYTES = 16
MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str, salt: str) -> str:
    """Hash a password with its salt.

    Args:
        password: Plain-text password.
        salt: Hex salt stored alongside the hash.

    Returns:
        str: Lower-case hex SHA-256 digest of ``password + salt``.
    """
    return sha256((password + salt).encode("utf-8")).hexdigest()


def generate_salt() -> str:
    return secrets.token_hex(SALT_BYTES)


def normalize_email(email: str) -> str:
    return email.lower().strip()


class AdminAuthService:
    """Service for admin accounts and login."""

    def __init__(self) -> None:
        """Initialize admin auth service with Supabase client."""
        self.client = get_supabase_client()

    async def _get_admin(self, email: str) -> AdminUser | None:
        response = (
            self.client.table(ADMIN_USERS_TABLE)
            .select("*")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Check admin credentials.

        Bad credentials are a normal outcome, not an error: they come back
        as ``{"success": False, "error": ...}`` with the same message
        whether the email or the password was wrong.

        Args:
            email: Admin email, any case.
            password: Plain-text password.

        Returns:
            dict: ``{"success": True, "email": ...}`` or
            ``{"success": False, "error": "Invalid credentials"}``.
        """
        email = normalize_email(email)
        user = await self._get_admin(email)

        if not user:
            logger.warning("Admin login failed: unknown email")
            return {"success": False, "error": INVALID_CREDENTIALS}

        candidate = hash_password(password, user["salt"])
        if not hmac.compare_digest(candidate, user["password_hash"]):
            logger.warning("Admin login failed: wrong password for %s", email)
            return {"success": False, "error": INVALID_CREDENTIALS}

        logger.info("Admin %s logged in", email)
        return {"success": True, "email": user["email"]}

    async def create_admin(self, email: str, password: str) -> dict[str, Any]:
        """Create a new admin account.

        Args:
            email: Admin email; stored lower-cased and trimmed.
            password: Plain-text password, at least 6 characters.

        Returns:
            dict: ``{"id", "email", "action": "created"}``.

        Raises:
            ValidationError: On a malformed email, short password or
                an email that is already registered.
        """
        email = normalize_email(email)

        if "@" not in email:
            raise ValidationError("Invalid email format")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        if await self._get_admin(email):
            raise ValidationError("Admin with this email already exists")

        salt = generate_salt()
        response = (
            self.client.table(ADMIN_USERS_TABLE)
            .insert(
                {
                    "email": email,
                    "password_hash": hash_password(password, salt),
                    "salt": salt,
                    "created_at": int(time.time() * 1000),
                }
            )
            .execute()
        )

        admin_id = str(response.data[0]["id"])
        logger.info("Created admin %s", email)
        return {"id": admin_id, "email": email, "action": "created"}

    async def has_admins(self) -> bool:
        """Check whether at least one admin exists (first-time setup)."""
        response = self.client.table(ADMIN_USERS_TABLE).select("id").limit(1).execute()
        return bool(response.data)
