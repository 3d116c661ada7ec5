"""Database model type definitions."""

from src.models.admin_config import AdminConfig
from src.models.admin_user import AdminUser
from src.models.device_profile import DeviceProfile

__all__ = [
    "AdminConfig",
    "AdminUser",
    "DeviceProfile",
]
