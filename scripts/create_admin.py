#!/usr/bin/env python
"""Script to create an admin account.

Usage:
    python scripts/create_admin.py admin@example.com
    ADMIN_PASSWORD=... python scripts/create_admin.py admin@example.com

Used for first-time setup, before any admin can sign in to the panel.
The password is prompted for unless ADMIN_PASSWORD is set.
"""

import asyncio
import getpass
import logging
import os
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.middleware.error_handler import ValidationError
from src.services.admin_auth_service import AdminAuthService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def main() -> None:
    """Create one admin from the command line."""
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)

    email = sys.argv[1]
    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Password: ")

    service = AdminAuthService()
    if await service.has_admins():
        logger.info("Admin accounts already exist; adding another one")

    try:
        result = await service.create_admin(email, password)
    except ValidationError as e:
        logger.error("Could not create admin: %s", e.message)
        sys.exit(1)

    logger.info("Created admin %s (id %s)", result["email"], result["id"])


if __name__ == "__main__":
    asyncio.run(main())
