"""SQLAlchemy ORM models for the Menu QR API."""

from app.models.menu import Menu, MenuItem, MenuSection
from app.models.qr_code import QRCode, QRCodeScan

__all__ = [
    "Menu",
    "MenuItem",
    "MenuSection",
    "QRCode",
    "QRCodeScan",
]
