"""Device profile Pydantic schemas for API request/response models."""

from typing import Literal

from pydantic import Field

from src.schemas.common import CamelModel


class SaveProfileRequest(CamelModel):
    """Arguments for saving a device's preferences.

    Only the argument shapes are checked here; format and range rules are
    enforced by the service so every caller gets the same messages.
    """

    device_id: str = Field(description="UUID v4 identifying the device")
    vibes: list[str] = Field(description="Selected preference tags (1-10)")
    language: str = Field(description="English or Nepali")
    reminder_times: list[str] = Field(description="1-3 reminder times in HH:mm")
    ai_provider: str | None = Field(default=None, description="Preferred generation backend; omit for the default")


class SaveProfileResponse(CamelModel):
    """Result of a profile upsert."""

    id: str = Field(description="Stored profile identifier")
    action: Literal["created", "updated"] = Field(description="Whether the profile was created or updated")


class DeviceProfileResponse(CamelModel):
    """A stored device profile."""

    id: str = Field(description="Stored profile identifier")
    device_id: str = Field(description="Device identifier")
    vibes: list[str] = Field(description="Selected preference tags")
    language: str = Field(description="Preferred language")
    reminder_times: list[str] = Field(description="Reminder times in HH:mm")
    ai_provider: str | None = Field(default=None, description="Preferred generation backend")
    daily_roast_count: int = Field(description="Roasts counted on last_roast_date")
    last_roast_date: str = Field(description="UTC date (YYYY-MM-DD) of the last counted roast, or empty")
    created_at: int = Field(description="Creation time, ms since epoch")
    updated_at: int = Field(description="Last mutation time, ms since epoch")


class RoastStatusResponse(CamelModel):
    """Daily roast counter for a device as it stands today."""

    device_id: str = Field(description="Device identifier")
    daily_roast_count: int = Field(description="Roasts counted today")
    last_roast_date: str = Field(description="UTC date of the last counted roast, or empty")
    remaining: int = Field(description="Roasts still available today")


class DeviceStatsResponse(CamelModel):
    """Aggregate device counts for the admin dashboard."""

    total_devices: int = Field(description="Number of stored profiles")
    recent_devices: int = Field(description="Profiles created within the recent window")
