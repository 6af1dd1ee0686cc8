"""QR code and scan analytics models."""

from __future__ import annotations

import typing
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import JSON_COMPATIBLE, Base, TimestampMixin
from app.utils.datetime import utcnow

if typing.TYPE_CHECKING:  # pragma: no cover
    from app.models.menu import Menu


class QRCode(TimestampMixin, Base):
    """Rendered QR code pointing at a public menu page."""
    __tablename__ = "qr_codes"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True
    )
    qr_data: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    design_config: Mapped[dict] = mapped_column(JSON_COMPATIBLE, default=dict)
    format: Mapped[str] = mapped_column(String(8), nullable=False, default="png")
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=256)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    menu: Mapped["Menu"] = relationship(back_populates="qr_codes")
    scans: Mapped[list["QRCodeScan"]] = relationship(
        back_populates="qr_code", cascade="save-update, merge, delete"
    )


class QRCodeScan(Base):
    """Single recorded scan of a menu QR code."""
    __tablename__ = "qr_code_analytics"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    qr_code_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("qr_codes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menu_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scan_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    user_agent: Mapped[str | None] = mapped_column(Text)
    ip_address: Mapped[str | None] = mapped_column(String(64))
    referrer: Mapped[str | None] = mapped_column(Text)
    location: Mapped[dict | None] = mapped_column(JSON_COMPATIBLE)
    device_info: Mapped[dict] = mapped_column(JSON_COMPATIBLE, default=dict)
    session_id: Mapped[str | None] = mapped_column(String(64))

    qr_code: Mapped[QRCode] = relationship(back_populates="scans")
    menu: Mapped["Menu"] = relationship(back_populates="scans")
