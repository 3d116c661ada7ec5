"""Device profile API routes."""

from fastapi import APIRouter

from src.schemas.device_profile import (
    DeviceProfileResponse,
    DeviceStatsResponse,
    RoastStatusResponse,
    SaveProfileRequest,
    SaveProfileResponse,
)
from src.services.device_profile_service import DeviceProfileService

router = APIRouter(prefix="/device-profiles", tags=["device-profiles"])


@router.post(
    "",
    response_model=SaveProfileResponse,
    summary="Save device profile",
    description="Creates the profile for a new device or replaces the preferences of an existing one.",
)
async def save_profile(data: SaveProfileRequest) -> SaveProfileResponse:
    """Upsert a device profile.

    Args:
        data: Device id and preferences.

    Returns:
        SaveProfileResponse: Stored id and whether it was created or updated.

    Raises:
        ValidationError: 422 if any field breaks a format or range rule.
    """
    service = DeviceProfileService()
    result = await service.save_profile(
        device_id=data.device_id,
        vibes=data.vibes,
        language=data.language,
        reminder_times=data.reminder_times,
        ai_provider=data.ai_provider,
    )
    return SaveProfileResponse(**result)


@router.get(
    "/stats",
    response_model=DeviceStatsResponse,
    summary="Device statistics",
    description="Total number of devices and how many were created in the last week.",
)
async def get_stats() -> DeviceStatsResponse:
    """Get device counts for the admin dashboard."""
    service = DeviceProfileService()
    return DeviceStatsResponse(**await service.get_stats())


@router.get(
    "/{device_id}",
    response_model=DeviceProfileResponse | None,
    summary="Get device profile",
    description="Returns the stored profile, or null when the device has none.",
)
async def get_profile(device_id: str) -> DeviceProfileResponse | None:
    """Get a device profile.

    Args:
        device_id: The device identifier.

    Returns:
        DeviceProfileResponse | None: The profile, or None if not stored.
    """
    service = DeviceProfileService()
    profile = await service.get_profile(device_id)
    if profile is None:
        return None
    return DeviceProfileResponse(**profile)


@router.post(
    "/{device_id}/roasts",
    response_model=RoastStatusResponse,
    summary="Count a roast",
    description="Counts one roast against the device's daily quota.",
    responses={
        404: {"description": "Device profile not found"},
        429: {"description": "Daily roast limit reached"},
    },
)
async def increment_roast_count(device_id: str) -> RoastStatusResponse:
    """Increment the daily roast counter.

    Args:
        device_id: The device identifier.

    Returns:
        RoastStatusResponse: Counter state after the increment.

    Raises:
        NotFoundError: 404 if no profile exists.
        QuotaExceededError: 429 if the daily limit is reached.
    """
    service = DeviceProfileService()
    return RoastStatusResponse(**await service.increment_roast_count(device_id))


@router.get(
    "/{device_id}/roasts",
    response_model=RoastStatusResponse,
    summary="Get roast quota",
    description="Returns today's roast count and how many roasts remain.",
    responses={404: {"description": "Device profile not found"}},
)
async def get_roast_status(device_id: str) -> RoastStatusResponse:
    """Get today's roast counter without changing it."""
    service = DeviceProfileService()
    return RoastStatusResponse(**await service.get_roast_status(device_id))
