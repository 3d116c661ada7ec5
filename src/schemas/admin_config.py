"""Admin configuration schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ConfigEntry(BaseModel):
    """A single key/value pair to store."""

    key: str = Field(description="Configuration key (must be a recognised key)")
    value: str = Field(description="Configuration value")


class BatchSetConfigsRequest(BaseModel):
    """Arguments for setting several configuration values at once."""

    configs: list[ConfigEntry] = Field(description="Entries applied in order")


class ConfigSetResult(BaseModel):
    """Outcome for one entry of a batch set."""

    id: str
    key: str
    action: Literal["created", "updated"]


class AdminConfigResponse(BaseModel):
    """A stored configuration row."""

    id: str = Field(description="Row identifier")
    key: str = Field(description="Configuration key")
    value: str = Field(description="Configuration value")
    updated_at: int = Field(description="Last update time, ms since epoch")
