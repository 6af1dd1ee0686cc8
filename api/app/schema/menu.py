"""Menu, section, and item schemas for request/response payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schema.base import ORMModel, Timestamped, require_text

# Matches the String(255) name columns.
NAME_MAX_LENGTH = 255


class MenuItemInput(BaseModel):
    """Item payload; list position becomes its sort order."""
    name: str = Field(max_length=NAME_MAX_LENGTH)
    description: str | None = None
    price: float = Field(ge=0)
    image_url: str | None = None
    is_available: bool = True

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        return require_text(value, "Item name")


class MenuSectionInput(BaseModel):
    """Section payload with its items in display order."""
    name: str = Field(max_length=NAME_MAX_LENGTH)
    description: str | None = None
    items: list[MenuItemInput] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        return require_text(value, "Section name")


class MenuCreate(BaseModel):
    """Payload for creating a menu with optional sections."""
    name: str = Field(max_length=NAME_MAX_LENGTH)
    restaurant_name: str = Field(max_length=NAME_MAX_LENGTH)
    description: str | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    theme_config: dict | None = None
    sections: list[MenuSectionInput] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        return require_text(value, "Menu name")

    @field_validator("restaurant_name")
    @classmethod
    def _restaurant_required(cls, value: str) -> str:
        return require_text(value, "Restaurant name")


class MenuImport(MenuCreate):
    """Bulk import payload; a menu without sections is rejected."""
    sections: list[MenuSectionInput] = Field(min_length=1)


class MenuUpdate(MenuCreate):
    """Full replacement of menu content; the slug never changes."""
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class MenuPublish(BaseModel):
    """Payload for publishing or unpublishing a menu."""
    is_published: bool


class QuickStartOverride(BaseModel):
    """Scalar fields a caller may override on a template menu."""
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    restaurant_name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    description: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class QuickStartRequest(BaseModel):
    """Payload for creating a menu from a template."""
    template_id: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    override: QuickStartOverride | None = None


class MenuItemRead(Timestamped):
    """Item representation returned to menu owners."""
    name: str
    description: str | None = None
    price: float
    image_url: str | None = None
    is_available: bool
    sort_order: int


class MenuSectionRead(Timestamped):
    """Section representation returned to menu owners."""
    name: str
    description: str | None = None
    sort_order: int
    items: list[MenuItemRead] = Field(default_factory=list)


class MenuSummaryRead(Timestamped):
    """Menu header fields for listings."""
    user_id: UUID
    name: str
    restaurant_name: str
    description: str | None = None
    currency: str
    theme_config: dict | None = None
    slug: str
    is_published: bool
    deleted_on: datetime | None = None


class MenuListItemRead(MenuSummaryRead):
    """Listing entry with the number of items across all sections."""
    items_count: int = 0


class MenuRead(MenuSummaryRead):
    """Menu representation returned to authenticated owners."""
    sections: list[MenuSectionRead] = Field(default_factory=list)


class DeletedMenusRead(BaseModel):
    """Soft-deleted menus for the current user."""
    menus: list[MenuSummaryRead] = Field(default_factory=list)
    total: int = 0


class MenuTemplateRead(BaseModel):
    """Template catalogue entry."""
    id: str
    label: str
    description: str
    tags: list[str] = Field(default_factory=list)


class QuickStartRead(BaseModel):
    """Menu created from a template and the template actually used."""
    menu: MenuRead
    template_id: str


class MenuImportRead(BaseModel):
    """Imported menu plus a confirmation message."""
    menu: MenuRead
    message: str = "Menu imported successfully"


class PublicMenuItemRead(ORMModel):
    """Item fields safe for public menu pages."""
    id: UUID
    name: str
    description: str | None = None
    price: float
    image_url: str | None = None
    is_available: bool


class PublicMenuSectionRead(ORMModel):
    """Section fields safe for public menu pages."""
    id: UUID
    name: str
    description: str | None = None
    items: list[PublicMenuItemRead] = Field(default_factory=list)


class PublicMenuRead(ORMModel):
    """Published menu without owner or lifecycle fields."""
    id: UUID
    name: str
    restaurant_name: str
    description: str | None = None
    currency: str
    slug: str
    sections: list[PublicMenuSectionRead] = Field(default_factory=list)
