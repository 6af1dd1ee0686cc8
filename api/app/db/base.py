"""Import all models here for Alembic autogenerate."""

from app.db.base_class import Base
from app.models import menu, qr_code  # noqa: F401

__all__ = ["Base"]
