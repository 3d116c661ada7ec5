"""Admin configuration model type definitions."""

from typing import TypedDict


class AdminConfig(TypedDict):
    """admin_config table row: one runtime setting, unique by key."""

    id: str
    key: str
    value: str
    updated_at: int
