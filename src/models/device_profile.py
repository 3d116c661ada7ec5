"""Device profile model type definitions for database operations."""

from typing import TypedDict


class DeviceProfile(TypedDict):
    """device_profiles table row representation.

    One row per device. ``device_id`` carries a unique index so the
    conditional insert in the service can detect a concurrent creator.
    ``daily_roast_count`` is only meaningful while ``last_roast_date``
    equals the current UTC date.
    """

    id: str
    device_id: str
    vibes: list[str]
    language: str
    reminder_times: list[str]
    ai_provider: str | None
    daily_roast_count: int
    last_roast_date: str
    created_at: int
    updated_at: int


class DeviceProfileCreate(TypedDict):
    """Data inserted for a device seen for the first time."""

    device_id: str
    vibes: list[str]
    language: str
    reminder_times: list[str]
    ai_provider: str | None
    daily_roast_count: int
    last_roast_date: str
    created_at: int
    updated_at: int


class DeviceProfilePreferences(TypedDict):
    """Fields replaced when an existing device saves its preferences."""

    vibes: list[str]
    language: str
    reminder_times: list[str]
    ai_provider: str | None
    updated_at: int
