"""Retire duplicate active QR codes across all menus.

Usage: python -m app.scripts.cleanup_qr_codes
"""

from __future__ import annotations

import asyncio
import logging
import sys

from app.core.config import settings
from app.db.session import async_session
from app.services import qr_code_service

logger = logging.getLogger("app.scripts.cleanup_qr_codes")


async def run_cleanup() -> dict:
    async with async_session() as session:
        return await qr_code_service.cleanup_all_duplicate_qr_codes(session)


def main() -> int:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
    )
    result = asyncio.run(run_cleanup())
    logger.info("Cleaned duplicate QR codes for %d menu(s)", result["processed"])
    for error in result["errors"]:
        logger.error("Cleanup error: %s", error)
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
