from . import (
    menu_service,
    menu_templates,
    qr_code_service,
)

__all__ = [
    "menu_service",
    "menu_templates",
    "qr_code_service",
]
"""Service-layer helpers for API operations."""
