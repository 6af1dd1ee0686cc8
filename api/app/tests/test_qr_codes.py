"""QR code generation, download, and duplicate cleanup."""

from __future__ import annotations

import base64
import io
import uuid
from datetime import timedelta

import pytest
from fastapi import HTTPException
from PIL import Image
from sqlalchemy import select

from app.core.config import settings
from app.models.qr_code import QRCode
from app.schema.menu import MenuCreate
from app.schema.qr_code import QRCodeOptions, QRDesignConfig
from app.services import menu_service, qr_code_service
from app.tests.utils import authenticate, create_menu, create_published_menu
from app.utils.datetime import utcnow


async def _published_menu(session, name: str = "Menu", restaurant: str = "QR Place"):
    menu = await menu_service.create_menu(session, uuid.uuid4(), MenuCreate(name=name, restaurant_name=restaurant))
    return await menu_service.set_published(session, menu, True)


def _decode_data_url(data_url: str) -> Image.Image:
    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(data_url[len(prefix):])))


def test_render_png_data_url_honors_size_and_colors():
    design = QRDesignConfig(foreground_color="#FF0000", background_color="#00FF00", margin=4)
    image = _decode_data_url(qr_code_service.render_png_data_url("https://example.com/menu/x", design, 300))

    assert image.size == (300, 300)
    rgb = image.convert("RGB")
    assert rgb.getpixel((0, 0)) == (0, 255, 0)
    assert (255, 0, 0) in {color for _, color in rgb.getcolors(maxcolors=1024)}


@pytest.mark.parametrize(
    "fmt,magic",
    [("png", b"\x89PNG"), ("jpg", b"\xff\xd8\xff")],
)
def test_render_qr_bytes_bitmaps(fmt, magic):
    content = qr_code_service.render_qr_bytes("https://example.com", QRDesignConfig(), 128, fmt)
    assert content.startswith(magic)


def test_render_qr_bytes_svg():
    content = qr_code_service.render_qr_bytes("https://example.com", QRDesignConfig(), 128, "svg")
    assert b"<svg" in content


@pytest.mark.asyncio
async def test_generate_requires_published_menu(session):
    menu = await menu_service.create_menu(session, uuid.uuid4(), MenuCreate(name="Draft", restaurant_name="QR"))

    with pytest.raises(HTTPException) as exc:
        await qr_code_service.generate_qr_code(session, menu, QRCodeOptions())

    assert exc.value.status_code == 400
    assert exc.value.detail == "Menu must be published to generate QR code"


@pytest.mark.asyncio
async def test_generate_reuses_active_row(session):
    menu = await _published_menu(session)

    first = await qr_code_service.generate_qr_code(session, menu, QRCodeOptions())
    second = await qr_code_service.generate_qr_code(
        session, menu, QRCodeOptions(size=512, design_config=QRDesignConfig(error_correction="H"))
    )

    assert first.id == second.id
    assert second.url == f"{settings.public_site_url}/menu/qr-place-menu?qr=1"
    assert second.size == 512
    assert second.design_config["error_correction"] == "H"
    assert _decode_data_url(second.qr_data).size == (512, 512)
    rows = (await session.execute(select(QRCode))).scalars().all()
    assert len(rows) == 1


@pytest.mark.asyncio
async def test_update_design_requires_existing_code(session):
    menu = await _published_menu(session)

    with pytest.raises(HTTPException) as exc:
        await qr_code_service.update_qr_design(session, menu, QRCodeOptions())
    assert exc.value.status_code == 404

    await qr_code_service.generate_qr_code(session, menu, QRCodeOptions())
    updated = await qr_code_service.update_qr_design(
        session, menu, QRCodeOptions(design_config=QRDesignConfig(foreground_color="#123456"))
    )
    assert updated.design_config["foreground_color"] == "#123456"


@pytest.mark.asyncio
async def test_deactivate_then_generate_creates_new_row(session):
    menu = await _published_menu(session)
    original = await qr_code_service.generate_qr_code(session, menu, QRCodeOptions())

    deactivated = await qr_code_service.deactivate_qr_codes(session, menu.id)
    assert deactivated == 1
    assert await qr_code_service.get_active_qr_code(session, menu.id) is None

    fresh = await qr_code_service.generate_qr_code(session, menu, QRCodeOptions())
    assert fresh.id != original.id
    assert fresh.is_active is True


def _duplicate(menu_id, *, age_minutes: int) -> QRCode:
    return QRCode(
        menu_id=menu_id,
        qr_data="data:image/png;base64,",
        url="https://example.com",
        design_config={},
        format="png",
        size=256,
        is_active=True,
        created_at=utcnow() - timedelta(minutes=age_minutes),
    )


@pytest.mark.asyncio
async def test_cleanup_keeps_newest_active_code(session):
    menu = await _published_menu(session)
    oldest = _duplicate(menu.id, age_minutes=30)
    middle = _duplicate(menu.id, age_minutes=20)
    newest = _duplicate(menu.id, age_minutes=10)
    session.add_all([oldest, middle, newest])
    await session.commit()

    assert await qr_code_service.cleanup_duplicate_qr_codes(session, menu.id) == 2
    assert await qr_code_service.cleanup_duplicate_qr_codes(session, menu.id) == 0

    active = await qr_code_service.get_active_qr_code(session, menu.id)
    assert active.id == newest.id
    assert oldest.is_active is False
    assert middle.is_active is False


@pytest.mark.asyncio
async def test_cleanup_all_duplicates(session):
    crowded = await _published_menu(session, name="Crowded")
    tidy = await _published_menu(session, name="Tidy")
    session.add_all(
        [
            _duplicate(crowded.id, age_minutes=5),
            _duplicate(crowded.id, age_minutes=1),
            _duplicate(tidy.id, age_minutes=1),
        ]
    )
    await session.commit()

    result = await qr_code_service.cleanup_all_duplicate_qr_codes(session)

    assert result == {"success": True, "processed": 1, "errors": []}
    active_rows = (await session.execute(select(QRCode).where(QRCode.is_active.is_(True)))).scalars().all()
    assert len(active_rows) == 2


@pytest.mark.asyncio
async def test_qr_code_routes(client):
    owner = authenticate(client)
    menu = await create_published_menu(owner, name="Dinner", restaurant_name="Scan Me")
    base = f"/api/menus/{menu['id']}/qr-code"

    missing = await client.get(base, headers=owner.headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "QR code not found"

    created = await client.post(base, json={"size": 200}, headers=owner.headers)
    assert created.status_code == 200
    body = created.json()
    assert body["qr_data"].startswith("data:image/png;base64,")
    assert body["url"].endswith("/menu/scan-me-dinner?qr=1")
    assert body["size"] == 200

    restyled = await client.put(
        base, json={"design_config": {"background_color": "#FAFAFA"}}, headers=owner.headers
    )
    assert restyled.status_code == 200
    assert restyled.json()["id"] == body["id"]

    fetched = await client.get(base, headers=owner.headers)
    assert fetched.json()["design_config"]["background_color"] == "#FAFAFA"

    bad_color = await client.post(
        base, json={"design_config": {"foreground_color": "red"}}, headers=owner.headers
    )
    assert bad_color.status_code == 422

    cleanup = await client.post(f"{base}/cleanup", headers=owner.headers)
    assert cleanup.json() == {"deactivated": 0}

    removed = await client.delete(base, headers=owner.headers)
    assert removed.status_code == 204
    assert (await client.get(base, headers=owner.headers)).status_code == 404


@pytest.mark.asyncio
async def test_qr_code_download_formats(client):
    owner = authenticate(client)
    menu = await create_published_menu(owner, name="Dinner", restaurant_name="Café Download")
    base = f"/api/menus/{menu['id']}/qr-code"
    await client.post(base, json={}, headers=owner.headers)

    png = await client.get(f"{base}/image", headers=owner.headers)
    jpg = await client.get(f"{base}/image?format=jpg", headers=owner.headers)
    svg = await client.get(f"{base}/image?format=svg", headers=owner.headers)
    bad = await client.get(f"{base}/image?format=gif", headers=owner.headers)

    assert png.headers["content-type"] == "image/png"
    assert png.content.startswith(b"\x89PNG")
    assert 'filename="cafe-download-dinner-qr.png"' in png.headers["content-disposition"]
    assert jpg.headers["content-type"] == "image/jpeg"
    assert svg.headers["content-type"].startswith("image/svg+xml")
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_qr_code_requires_published_menu_via_api(client):
    owner = authenticate(client)
    draft = await create_menu(owner)

    res = await client.post(f"/api/menus/{draft['id']}/qr-code", json={}, headers=owner.headers)

    assert res.status_code == 400
