"""Admin runtime configuration service."""

import logging
import time
from typing import Any

from src.api.middleware.error_handler import ValidationError
from src.core.supabase import ADMIN_CONFIG_TABLE, get_supabase_client
from src.models.admin_config import AdminConfig

logger = logging.getLogger(__name__)

# Keys the admin panel and mobile app understand. Anything else is rejected.
VALID_CONFIG_KEYS = frozenset(
    {
        "groq_api_key",
        "cerebras_api_key",
        "groq_model",
        "cerebras_model",
        "primary_ai_provider",
        "admin_pin",
        "app_enabled",
        "max_daily_roasts",
        "max_reminder_times",
    }
)


class AdminConfigService:
    """Service for the key/value configuration table."""

    def __init__(self) -> None:
        """Initialize admin config service with Supabase client."""
        self.client = get_supabase_client()

    async def batch_set_configs(self, configs: list[dict[str, str]]) -> list[dict[str, Any]]:
        """Set several configuration values, in order.

        Entries are written one by one. An unknown key stops the batch at
        that entry; entries already written stay written.

        Args:
            configs: ``{"key": ..., "value": ...}`` pairs.

        Returns:
            list[dict]: ``{"id", "key", "action"}`` for every entry written.

        Raises:
            ValidationError: On the first key outside the allow-list.
        """
        now_ms = int(time.time() * 1000)
        results = []

        for entry in configs:
            key = entry["key"]
            if key not in VALID_CONFIG_KEYS:
                raise ValidationError(f"Invalid config key: {key}")

            existing = await self.get_config(key)
            if existing:
                (
                    self.client.table(ADMIN_CONFIG_TABLE)
                    .update({"value": entry["value"], "updated_at": now_ms})
                    .eq("id", existing["id"])
                    .execute()
                )
                results.append({"id": str(existing["id"]), "key": key, "action": "updated"})
            else:
                response = (
                    self.client.table(ADMIN_CONFIG_TABLE)
                    .insert({"key": key, "value": entry["value"], "updated_at": now_ms})
                    .execute()
                )
                results.append({"id": str(response.data[0]["id"]), "key": key, "action": "created"})

        logger.info("Set %d config value(s): %s", len(results), ", ".join(r["key"] for r in results))
        return results

    async def get_config(self, key: str) -> AdminConfig | None:
        """Get a single config row by key, or None."""
        response = (
            self.client.table(ADMIN_CONFIG_TABLE)
            .select("*")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    async def get_all_configs(self) -> dict[str, str]:
        """Get every config value as a ``{key: value}`` mapping."""
        return {row["key"]: row["value"] for row in await self.list_configs()}

    async def list_configs(self) -> list[AdminConfig]:
        """List all config rows."""
        response = self.client.table(ADMIN_CONFIG_TABLE).select("*").execute()
        return response.data or []
