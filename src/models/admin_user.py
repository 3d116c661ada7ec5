"""Admin user model type definitions."""

from typing import TypedDict


class AdminUser(TypedDict):
    """admin_users table row representation.

    ``password_hash`` is the hex SHA-256 of the password followed by
    ``salt``; ``email`` is stored lower-cased and trimmed.
    """

    id: str
    email: str
    password_hash: str
    salt: str
    created_at: int
