"""Menu QR code endpoints: generation, downloads, cleanup, and analytics."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, get_current_user, get_db
from app.models.qr_code import QRCode, QRCodeScan
from app.schema.qr_code import (
    QRAnalyticsSummary,
    QRCleanupRead,
    QRCodeOptions,
    QRCodeRead,
    QRFormat,
    QRScanRead,
)
from app.services import menu_service, qr_code_service

router = APIRouter()


async def _require_active_qr_code(session: AsyncSession, menu_id: uuid.UUID) -> QRCode:
    qr_code = await qr_code_service.get_active_qr_code(session, menu_id)
    if not qr_code:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="QR code not found")
    return qr_code


@router.get("/{menu_id}/qr-code", response_model=QRCodeRead)
async def get_qr_code_endpoint(
    menu_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> QRCode:
    """Fetch the active QR code for a menu."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    return await _require_active_qr_code(session, menu.id)


@router.post("/{menu_id}/qr-code", response_model=QRCodeRead)
async def generate_qr_code_endpoint(
    menu_id: uuid.UUID,
    payload: QRCodeOptions,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> QRCode:
    """Generate (or regenerate) the QR code for a published menu."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    return await qr_code_service.generate_qr_code(session, menu, payload)


@router.put("/{menu_id}/qr-code", response_model=QRCodeRead)
async def update_qr_code_endpoint(
    menu_id: uuid.UUID,
    payload: QRCodeOptions,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> QRCode:
    """Restyle the existing QR code."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    return await qr_code_service.update_qr_design(session, menu, payload)


@router.delete(
    "/{menu_id}/qr-code",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def deactivate_qr_code_endpoint(
    menu_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> None:
    """Deactivate every QR code of a menu."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    await qr_code_service.deactivate_qr_codes(session, menu.id)


@router.get("/{menu_id}/qr-code/image", response_class=Response)
async def download_qr_code_endpoint(
    menu_id: uuid.UUID,
    fmt: QRFormat = Query(default="png", alias="format"),
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Response:
    """Download the active QR code as PNG, JPEG, or SVG."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    qr_code = await _require_active_qr_code(session, menu.id)
    content, media_type, filename = qr_code_service.render_qr_image(menu, qr_code, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/{menu_id}/qr-code/cleanup", response_model=QRCleanupRead)
async def cleanup_qr_codes_endpoint(
    menu_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> QRCleanupRead:
    """Deactivate all but the newest active QR code."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    deactivated = await qr_code_service.cleanup_duplicate_qr_codes(session, menu.id)
    return QRCleanupRead(deactivated=deactivated)


@router.get("/{menu_id}/qr-code/analytics", response_model=QRAnalyticsSummary)
async def qr_analytics_endpoint(
    menu_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> QRAnalyticsSummary:
    """Summarize scans for a menu."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    return await qr_code_service.get_analytics_summary(session, menu.id)


@router.get("/{menu_id}/qr-code/scans", response_model=list[QRScanRead])
async def list_qr_scans_endpoint(
    menu_id: uuid.UUID,
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> list[QRCodeScan]:
    """List raw scan events, newest first."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    return await qr_code_service.list_scans(session, menu.id, start=start, end=end)
