"""Menu, section, and item models for restaurant menus."""

from __future__ import annotations

import typing
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.orm import relationship as sa_relationship

from app.db.base_class import JSON_COMPATIBLE, Base, TimestampMixin

if typing.TYPE_CHECKING:  # pragma: no cover
    from app.models.qr_code import QRCode, QRCodeScan

SLUG_COLUMN_LENGTH = 255


class Menu(TimestampMixin, Base):
    """Menu header owned by an identity-provider user."""
    __tablename__ = "menus"
    __table_args__ = (UniqueConstraint("slug", name="uq_menu_slug"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    restaurant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    theme_config: Mapped[dict | None] = mapped_column(JSON_COMPATIBLE)
    slug: Mapped[str] = mapped_column(String(SLUG_COLUMN_LENGTH), nullable=False, index=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    sections: Mapped[list["MenuSection"]] = sa_relationship(
        back_populates="menu", cascade="all, delete-orphan", order_by="MenuSection.sort_order"
    )
    # QR rows and scans are attached by foreign key, so no delete-orphan here.
    qr_codes: Mapped[list["QRCode"]] = sa_relationship(
        back_populates="menu", cascade="save-update, merge, delete"
    )
    scans: Mapped[list["QRCodeScan"]] = sa_relationship(
        back_populates="menu", cascade="save-update, merge, delete"
    )


class MenuSection(TimestampMixin, Base):
    """Titled group of items with an explicit display order."""
    __tablename__ = "menu_sections"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    menu: Mapped[Menu] = sa_relationship(back_populates="sections")
    items: Mapped[list["MenuItem"]] = sa_relationship(
        back_populates="section", cascade="all, delete-orphan", order_by="MenuItem.sort_order"
    )


class MenuItem(TimestampMixin, Base):
    """Priced dish or drink within a section."""
    __tablename__ = "menu_items"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    section_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("menu_sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    section: Mapped[MenuSection] = sa_relationship(back_populates="items")
