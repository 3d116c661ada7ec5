"""Admin configuration API routes."""

from fastapi import APIRouter

from src.schemas.admin_config import AdminConfigResponse, BatchSetConfigsRequest, ConfigSetResult
from src.services.admin_config_service import AdminConfigService

router = APIRouter(prefix="/admin/configs", tags=["admin-config"])


@router.post(
    "/batch",
    response_model=list[ConfigSetResult],
    summary="Set configuration values",
    description="Upserts several configuration values. Stops at the first unknown key.",
)
async def batch_set_configs(data: BatchSetConfigsRequest) -> list[ConfigSetResult]:
    """Set several configuration values.

    Args:
        data: Entries to write, applied in order.

    Returns:
        list[ConfigSetResult]: Outcome for every entry written.

    Raises:
        ValidationError: 422 on an unknown key. Earlier entries remain written.
    """
    service = AdminConfigService()
    results = await service.batch_set_configs([entry.model_dump() for entry in data.configs])
    return [ConfigSetResult(**result) for result in results]


@router.get(
    "",
    response_model=list[AdminConfigResponse],
    summary="List configuration entries",
)
async def list_configs() -> list[AdminConfigResponse]:
    """List all configuration rows for the admin dashboard."""
    service = AdminConfigService()
    return [AdminConfigResponse(**row) for row in await service.list_configs()]


@router.get(
    "/values",
    response_model=dict[str, str],
    summary="Get all configuration values",
    description="Returns every configuration value keyed by name.",
)
async def get_all_configs() -> dict[str, str]:
    service = AdminConfigService()
    return await service.get_all_configs()


@router.get(
    "/{key}",
    response_model=AdminConfigResponse | None,
    summary="Get a configuration entry",
    description="Returns the entry for the key, or null when it has never been set.",
)
async def get_config(key: str) -> AdminConfigResponse | None:
    service = AdminConfigService()
    row = await service.get_config(key)
    return AdminConfigResponse(**row) if row else None
