"""QR code generation, maintenance, and scan analytics services."""

from __future__ import annotations

import base64
import io
import logging
import uuid
from collections import Counter
from datetime import datetime
from typing import Iterable

import qrcode
import qrcode.constants
from fastapi import HTTPException, status
from PIL import Image
from qrcode.image.svg import SvgPathImage
from slugify import slugify
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.menu import Menu
from app.models.qr_code import QRCode, QRCodeScan
from app.schema.qr_code import (
    DeviceCount,
    HourlyCount,
    QRAnalyticsSummary,
    QRCodeOptions,
    QRDesignConfig,
    QRFormat,
)
from app.utils.datetime import start_of_day, start_of_month, start_of_week, to_utc, utcnow
from app.utils.user_agent import UNKNOWN, parse_user_agent, session_fingerprint

logger = logging.getLogger("app.services.qr_code")

_ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}
_MEDIA_TYPES = {"png": "image/png", "jpg": "image/jpeg", "svg": "image/svg+xml"}
TOP_DEVICE_LIMIT = 5


def menu_public_url(slug: str) -> str:
    """Public page a printed QR code sends diners to."""
    return f"{settings.public_site_url}/menu/{slug}?qr=1"


def _build_qr(url: str, design: QRDesignConfig, **kwargs) -> qrcode.QRCode:
    margin = design.margin if design.margin is not None else settings.qr_default_margin
    qr = qrcode.QRCode(error_correction=_ERROR_CORRECTION[design.error_correction], border=margin, **kwargs)
    qr.add_data(url)
    qr.make(fit=True)
    return qr


def render_qr_bitmap(url: str, design: QRDesignConfig, size: int) -> Image.Image:
    """Render a square RGB QR image scaled to ``size`` pixels."""
    qr = _build_qr(url, design)
    image = qr.make_image(fill_color=design.foreground_color, back_color=design.background_color).get_image()
    return image.convert("RGB").resize((size, size), Image.Resampling.NEAREST)


def render_png_data_url(url: str, design: QRDesignConfig, size: int) -> str:
    buffer = io.BytesIO()
    render_qr_bitmap(url, design, size).save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def render_qr_bytes(url: str, design: QRDesignConfig, size: int, fmt: QRFormat) -> bytes:
    """Encode a QR code for download. SVG output is monochrome vector paths."""
    buffer = io.BytesIO()
    if fmt == "svg":
        qr = _build_qr(url, design, image_factory=SvgPathImage)
        qr.make_image().save(buffer)
    elif fmt == "jpg":
        render_qr_bitmap(url, design, size).save(buffer, format="JPEG", quality=90)
    else:
        render_qr_bitmap(url, design, size).save(buffer, format="PNG")
    return buffer.getvalue()


async def get_active_qr_code(session: AsyncSession, menu_id: uuid.UUID) -> QRCode | None:
    """Newest active QR code for a menu."""
    result = await session.execute(
        select(QRCode)
        .where(QRCode.menu_id == menu_id, QRCode.is_active.is_(True))
        .order_by(QRCode.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def generate_qr_code(session: AsyncSession, menu: Menu, options: QRCodeOptions) -> QRCode:
    """Render and store the menu's QR code, reusing the active row when present."""
    if not menu.is_published:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Menu must be published to generate QR code",
        )
    url = menu_public_url(menu.slug)
    size = options.size or settings.qr_default_size
    qr_data = render_png_data_url(url, options.design_config, size)

    qr_code = await get_active_qr_code(session, menu.id)
    if qr_code is None:
        qr_code = QRCode(menu_id=menu.id, is_active=True)
        session.add(qr_code)
    qr_code.qr_data = qr_data
    qr_code.url = url
    qr_code.design_config = options.design_config.model_dump()
    qr_code.format = options.format
    qr_code.size = size
    await session.commit()
    await session.refresh(qr_code)
    logger.info("Generated QR code %s for menu %s", qr_code.id, menu.id)
    return qr_code


async def update_qr_design(session: AsyncSession, menu: Menu, options: QRCodeOptions) -> QRCode:
    if await get_active_qr_code(session, menu.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="QR code not found")
    return await generate_qr_code(session, menu, options)


async def deactivate_qr_codes(session: AsyncSession, menu_id: uuid.UUID) -> int:
    result = await session.execute(
        update(QRCode)
        .where(QRCode.menu_id == menu_id, QRCode.is_active.is_(True))
        .values(is_active=False)
    )
    await session.commit()
    logger.info("Deactivated %d QR code(s) for menu %s", result.rowcount, menu_id)
    return result.rowcount


async def cleanup_duplicate_qr_codes(session: AsyncSession, menu_id: uuid.UUID) -> int:
    """Keep only the newest active QR code for a menu; return how many were retired."""
    result = await session.execute(
        select(QRCode)
        .where(QRCode.menu_id == menu_id, QRCode.is_active.is_(True))
        .order_by(QRCode.created_at.desc())
    )
    active = result.scalars().all()
    stale = active[1:]
    for qr_code in stale:
        qr_code.is_active = False
    if stale:
        await session.commit()
        logger.info("Retired %d duplicate QR code(s) for menu %s", len(stale), menu_id)
    return len(stale)


async def cleanup_all_duplicate_qr_codes(session: AsyncSession) -> dict:
    """Run duplicate cleanup for every menu holding more than one active QR code."""
    result = await session.execute(
        select(QRCode.menu_id)
        .where(QRCode.is_active.is_(True))
        .group_by(QRCode.menu_id)
        .having(func.count(QRCode.id) > 1)
    )
    menu_ids = result.scalars().all()
    processed = 0
    errors: list[str] = []
    for menu_id in menu_ids:
        try:
            await cleanup_duplicate_qr_codes(session, menu_id)
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.exception("QR cleanup failed for menu %s", menu_id)
            errors.append(f"{menu_id}: {exc}")
            continue
        processed += 1
    return {"success": not errors, "processed": processed, "errors": errors}


def download_filename(menu: Menu, fmt: QRFormat) -> str:
    stem = slugify(f"{menu.restaurant_name} {menu.name}") or "menu"
    return f"{stem}-qr.{fmt}"


def render_qr_image(menu: Menu, qr_code: QRCode, fmt: QRFormat) -> tuple[bytes, str, str]:
    """Render a stored QR code for download as (content, media type, filename)."""
    design = QRDesignConfig.model_validate(qr_code.design_config or {})
    content = render_qr_bytes(qr_code.url, design, qr_code.size, fmt)
    return content, _MEDIA_TYPES[fmt], download_filename(menu, fmt)


async def track_scan(
    session: AsyncSession,
    menu_id: uuid.UUID,
    *,
    user_agent: str | None,
    ip_address: str | None,
    referrer: str | None,
) -> QRCodeScan:
    """Record a scan against the menu's active QR code."""
    qr_code = await get_active_qr_code(session, menu_id)
    if qr_code is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="QR code not found")
    scanned_at = utcnow()
    scan = QRCodeScan(
        qr_code_id=qr_code.id,
        menu_id=menu_id,
        scan_timestamp=scanned_at,
        user_agent=user_agent,
        ip_address=ip_address,
        referrer=referrer,
        device_info=parse_user_agent(user_agent),
        session_id=session_fingerprint(user_agent, ip_address, scanned_at.date()),
    )
    session.add(scan)
    await session.commit()
    logger.info("Recorded scan of QR code %s for menu %s", qr_code.id, menu_id)
    return scan


def summarize_scans(scans: Iterable[QRCodeScan], now: datetime) -> QRAnalyticsSummary:
    """Aggregate scan rows into dashboard counters relative to ``now``."""
    today = start_of_day(now)
    week = start_of_week(now)
    month = start_of_month(now)

    total = 0
    sessions: set[str] = set()
    scans_today = scans_this_week = scans_this_month = 0
    devices: Counter[str] = Counter()
    hours = [0] * 24

    for scan in scans:
        total += 1
        scanned_at = to_utc(scan.scan_timestamp)
        if scan.session_id:
            sessions.add(scan.session_id)
        if scanned_at >= today:
            scans_today += 1
        if scanned_at >= week:
            scans_this_week += 1
        if scanned_at >= month:
            scans_this_month += 1
        devices[(scan.device_info or {}).get("device_type") or UNKNOWN] += 1
        hours[scanned_at.hour] += 1

    return QRAnalyticsSummary(
        total_scans=total,
        unique_sessions=len(sessions),
        scans_today=scans_today,
        scans_this_week=scans_this_week,
        scans_this_month=scans_this_month,
        top_devices=[
            DeviceCount(device=device, count=count) for device, count in devices.most_common(TOP_DEVICE_LIMIT)
        ],
        hourly_distribution=[HourlyCount(hour=hour, count=count) for hour, count in enumerate(hours)],
    )


async def get_analytics_summary(
    session: AsyncSession, menu_id: uuid.UUID, *, now: datetime | None = None
) -> QRAnalyticsSummary:
    result = await session.execute(select(QRCodeScan).where(QRCodeScan.menu_id == menu_id))
    return summarize_scans(result.scalars().all(), now or utcnow())


async def list_scans(
    session: AsyncSession,
    menu_id: uuid.UUID,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[QRCodeScan]:
    """Scans for a menu, newest first, within optional inclusive bounds."""
    query = select(QRCodeScan).where(QRCodeScan.menu_id == menu_id)
    if start is not None:
        query = query.where(QRCodeScan.scan_timestamp >= start)
    if end is not None:
        query = query.where(QRCodeScan.scan_timestamp <= end)
    result = await session.execute(query.order_by(QRCodeScan.scan_timestamp.desc()))
    return result.scalars().all()
