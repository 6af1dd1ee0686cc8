"""Public endpoints for diners viewing menus and scanning QR codes."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.schema.menu import PublicMenuRead
from app.schema.qr_code import TrackScanRead
from app.services import menu_service, qr_code_service

router = APIRouter()


def _client_ip(request: Request) -> str | None:
    """Best-effort client address, honoring reverse-proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return None


@router.get("/menus/{identifier}", response_model=PublicMenuRead)
async def read_public_menu(identifier: str, session: AsyncSession = Depends(get_db)) -> PublicMenuRead:
    """Fetch a published menu by id or slug."""
    menu = await menu_service.get_public_menu(session, identifier)
    if not menu:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return PublicMenuRead.model_validate(menu)


@router.post("/track-qr-scan/{identifier}", response_model=TrackScanRead, status_code=status.HTTP_201_CREATED)
async def track_qr_scan(
    identifier: str, request: Request, session: AsyncSession = Depends(get_db)
) -> TrackScanRead:
    """Record a QR scan for a published menu."""
    menu_id = await menu_service.resolve_public_menu_id(session, identifier)
    if not menu_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    await qr_code_service.track_scan(
        session,
        menu_id,
        user_agent=request.headers.get("user-agent"),
        ip_address=_client_ip(request),
        referrer=request.headers.get("referer"),
    )
    return TrackScanRead()
