"""Device profile business logic service.

Owns validation and upsert of per-device preferences and the daily roast
counter used for rate limiting.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from src.api.middleware.error_handler import (
    ConflictError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from src.core.config import get_settings
from src.core.supabase import DEVICE_PROFILES_TABLE, get_supabase_client
from src.models.device_profile import DeviceProfile, DeviceProfileCreate, DeviceProfilePreferences

logger = logging.getLogger(__name__)

UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
REMINDER_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

SUPPORTED_LANGUAGES = ("English", "Nepali")
MIN_VIBES = 1
MAX_VIBES = 10
MAX_VIBE_LENGTH = 50
MIN_REMINDER_TIMES = 1
MAX_REMINDER_TIMES = 3

MS_PER_DAY = 24 * 60 * 60 * 1000


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _seconds_until_next_utc_day(moment: datetime) -> int:
    """Seconds from ``moment`` until the daily counter rolls over."""
    next_day = datetime.combine(
        moment.date() + timedelta(days=1),
        datetime.min.time(),
        tzinfo=timezone.utc,
    )
    return max(1, int((next_day - moment).total_seconds()))


def validate_device_id(device_id: str) -> None:
    """Reject anything that is not a textual UUID v4."""
    if not UUID_V4_PATTERN.fullmatch(device_id):
        raise ValidationError("Invalid device ID format")


def validate_vibes(vibes: list[str]) -> None:
    """Check vibe count and per-vibe length.

    Emptiness is judged on the trimmed value; the 50 character cap applies
    to the string as submitted, which is also what gets stored.
    """
    if not MIN_VIBES <= len(vibes) <= MAX_VIBES:
        raise ValidationError(f"Vibes must contain {MIN_VIBES}-{MAX_VIBES} items")
    for vibe in vibes:
        if not vibe.strip() or len(vibe) > MAX_VIBE_LENGTH:
            raise ValidationError(f"Each vibe must be 1-{MAX_VIBE_LENGTH} characters")


def validate_language(language: str) -> None:
    if language not in SUPPORTED_LANGUAGES:
        raise ValidationError("Language must be English or Nepali")


def validate_reminder_times(reminder_times: list[str]) -> None:
    if not MIN_REMINDER_TIMES <= len(reminder_times) <= MAX_REMINDER_TIMES:
        raise ValidationError(f"Must have {MIN_REMINDER_TIMES}-{MAX_REMINDER_TIMES} reminder times")
    for reminder_time in reminder_times:
        if not REMINDER_TIME_PATTERN.fullmatch(reminder_time):
            raise ValidationError("Reminder times must be in HH:mm format")


class RoastCounterConflict(Exception):
    """The counter row changed between read and conditional write."""


class DeviceProfileService:
    """Service for managing device profiles and their daily roast quota."""

    def __init__(self) -> None:
        """Initialize device profile service with Supabase client."""
        self.client = get_supabase_client()
        self.settings = get_settings()

    def _find_by_device_id(self, device_id: str) -> DeviceProfile | None:
        response = (
            self.client.table(DEVICE_PROFILES_TABLE)
            .select("*")
            .eq("device_id", device_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    async def save_profile(
        self,
        device_id: str,
        vibes: list[str],
        language: str,
        reminder_times: list[str],
        ai_provider: str | None = None,
    ) -> dict[str, Any]:
        """Create or update the preferences of a device.

        Validation runs before any read or write; the first rule broken
        fails the call. On update the counter fields and ``created_at`` are
        left alone, while ``ai_provider`` always takes the submitted value,
        so passing None clears it.

        Args:
            device_id: UUID v4 of the device.
            vibes: 1-10 preference tags.
            language: English or Nepali.
            reminder_times: 1-3 times in HH:mm.
            ai_provider: Preferred generation backend, None for the default.

        Returns:
            dict: ``{"id": ..., "action": "created" | "updated"}``.

        Raises:
            ValidationError: If any argument breaks a format or range rule.
        """
        validate_device_id(device_id)
        validate_vibes(vibes)
        validate_language(language)
        validate_reminder_times(reminder_times)

        now_ms = _to_ms(_utc_now())
        preferences: DeviceProfilePreferences = {
            "vibes": vibes,
            "language": language,
            "reminder_times": reminder_times,
            "ai_provider": ai_provider,
            "updated_at": now_ms,
        }

        existing = self._find_by_device_id(device_id)
        if existing is None:
            new_profile: DeviceProfileCreate = {
                "device_id": device_id,
                **preferences,
                "daily_roast_count": 0,
                "last_roast_date": "",
                "created_at": now_ms,
            }
            # ON CONFLICT (device_id) DO NOTHING: an empty result means another
            # request created the row after our lookup.
            response = (
                self.client.table(DEVICE_PROFILES_TABLE)
                .upsert(new_profile, on_conflict="device_id", ignore_duplicates=True)
                .execute()
            )
            if response.data:
                profile_id = str(response.data[0]["id"])
                logger.info("Created device profile %s for device %s", profile_id, device_id)
                return {"id": profile_id, "action": "created"}

            logger.info("Device %s was created concurrently, applying save as update", device_id)
            existing = self._find_by_device_id(device_id)
            if existing is None:
                raise ConflictError("Device profile could not be saved, please retry")

        self.client.table(DEVICE_PROFILES_TABLE).update(preferences).eq("id", existing["id"]).execute()
        logger.info("Updated device profile %s for device %s", existing["id"], device_id)
        return {"id": str(existing["id"]), "action": "updated"}

    async def get_profile(self, device_id: str) -> DeviceProfile | None:
        """Get a device profile.

        Malformed ids are not rejected; they simply match nothing.

        Args:
            device_id: The device identifier.

        Returns:
            dict | None: The profile data or None if not found.
        """
        return self._find_by_device_id(device_id)

    async def increment_roast_count(self, device_id: str) -> dict[str, Any]:
        """Count one roast against the device's daily quota.

        A count dated before today is stale and restarts at 1. When today's
        count already sits at the limit nothing is written. The write only
        lands if the counter is still what was read; otherwise the row is
        re-read and the step retried.

        Args:
            device_id: The device identifier.

        Returns:
            dict: New counter state with ``remaining`` roasts for today.

        Raises:
            NotFoundError: If no profile exists for the device.
            QuotaExceededError: If today's limit is already reached.
            ConflictError: If concurrent increments kept winning the race.
        """
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(RoastCounterConflict),
                stop=stop_after_attempt(self.settings.roast_increment_max_attempts),
                wait=wait_random_exponential(multiplier=0.05, max=0.5),
                reraise=True,
            ):
                with attempt:
                    return self._try_increment(device_id)
        except RoastCounterConflict as e:
            logger.warning("Roast counter for device %s kept changing under us", device_id)
            raise ConflictError("Roast count is being updated, please retry") from e

    def _try_increment(self, device_id: str) -> dict[str, Any]:
        profile = self._find_by_device_id(device_id)
        if profile is None:
            raise NotFoundError("Device profile not found")

        now = _utc_now()
        today = now.date().isoformat()
        limit = self.settings.max_daily_roasts
        read_count = profile["daily_roast_count"]
        read_date = profile["last_roast_date"]

        if read_date == today:
            if read_count >= limit:
                logger.warning("Device %s reached the daily roast limit", device_id)
                raise QuotaExceededError(
                    f"Daily roast limit reached (max {limit})",
                    retry_after=_seconds_until_next_utc_day(now),
                    limit=limit,
                )
            new_count = read_count + 1
            changes: dict[str, Any] = {"daily_roast_count": new_count, "updated_at": _to_ms(now)}
        else:
            new_count = 1
            changes = {"daily_roast_count": 1, "last_roast_date": today, "updated_at": _to_ms(now)}

        response = (
            self.client.table(DEVICE_PROFILES_TABLE)
            .update(changes)
            .eq("id", profile["id"])
            .eq("daily_roast_count", read_count)
            .eq("last_roast_date", read_date)
            .execute()
        )
        if not response.data:
            logger.debug("Roast counter for device %s changed concurrently", device_id)
            raise RoastCounterConflict(device_id)

        return {
            "device_id": device_id,
            "daily_roast_count": new_count,
            "last_roast_date": today,
            "remaining": limit - new_count,
        }

    async def get_roast_status(self, device_id: str) -> dict[str, Any]:
        """Get today's effective roast count without changing it.

        Args:
            device_id: The device identifier.

        Returns:
            dict: Counter state; a count from an earlier day reads as 0.

        Raises:
            NotFoundError: If no profile exists for the device.
        """
        profile = self._find_by_device_id(device_id)
        if profile is None:
            raise NotFoundError("Device profile not found")

        today = _utc_now().date().isoformat()
        count = profile["daily_roast_count"] if profile["last_roast_date"] == today else 0
        limit = self.settings.max_daily_roasts
        return {
            "device_id": device_id,
            "daily_roast_count": count,
            "last_roast_date": profile["last_roast_date"],
            "remaining": max(0, limit - count),
        }

    async def get_stats(self) -> dict[str, int]:
        """Count all devices and those created within the recent window.

        Scans the whole collection.

        Returns:
            dict: ``total_devices`` and ``recent_devices``.
        """
        response = self.client.table(DEVICE_PROFILES_TABLE).select("created_at").execute()
        rows = response.data or []

        cutoff = _to_ms(_utc_now()) - self.settings.stats_recent_window_days * MS_PER_DAY
        recent = sum(1 for row in rows if row["created_at"] > cutoff)
        return {"total_devices": len(rows), "recent_devices": recent}
