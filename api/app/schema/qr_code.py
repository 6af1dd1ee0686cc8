"""QR code and scan analytics schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.schema.base import ORMModel, Timestamped

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

QRFormat = Literal["png", "svg", "jpg"]
ErrorCorrectionLevel = Literal["L", "M", "Q", "H"]


class QRDesignConfig(BaseModel):
    """Visual options applied when rendering a QR code."""
    foreground_color: str = Field(default="#000000", pattern=HEX_COLOR_PATTERN)
    background_color: str = Field(default="#FFFFFF", pattern=HEX_COLOR_PATTERN)
    margin: int | None = Field(default=None, ge=0, le=16)
    error_correction: ErrorCorrectionLevel = "M"


class QRCodeOptions(BaseModel):
    """Payload for generating or restyling a menu QR code."""
    design_config: QRDesignConfig = Field(default_factory=QRDesignConfig)
    format: QRFormat = "png"
    size: int | None = Field(default=None, ge=64, le=2048)


class QRCodeRead(Timestamped):
    """Stored QR code with its rendered PNG data URL."""
    menu_id: UUID
    qr_data: str
    url: str
    design_config: dict = Field(default_factory=dict)
    format: str
    size: int
    is_active: bool


class QRCleanupRead(BaseModel):
    """Outcome of deactivating duplicate QR codes for one menu."""
    deactivated: int


class QRScanRead(ORMModel):
    """Recorded scan event."""
    id: UUID
    qr_code_id: UUID
    menu_id: UUID
    scan_timestamp: datetime
    user_agent: str | None = None
    ip_address: str | None = None
    referrer: str | None = None
    location: dict | None = None
    device_info: dict = Field(default_factory=dict)
    session_id: str | None = None


class DeviceCount(BaseModel):
    device: str
    count: int


class HourlyCount(BaseModel):
    hour: int
    count: int


class QRAnalyticsSummary(BaseModel):
    """Aggregated scan counters for a menu."""
    total_scans: int = 0
    unique_sessions: int = 0
    scans_today: int = 0
    scans_this_week: int = 0
    scans_this_month: int = 0
    top_devices: list[DeviceCount] = Field(default_factory=list)
    hourly_distribution: list[HourlyCount] = Field(default_factory=list)


class TrackScanRead(BaseModel):
    success: bool = True
