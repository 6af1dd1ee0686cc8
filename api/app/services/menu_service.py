"""Menu CRUD, public lookup, and slug allocation services.

Invariants:
- Owner-facing reads never return soft-deleted menus.
- Public reads only return published, non-deleted menus.
- A slug is assigned once at creation and never rewritten.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.menu import Menu, MenuItem, MenuSection
from app.schema.menu import MenuCreate, MenuImport, MenuSectionInput, MenuUpdate, QuickStartRequest
from app.services import menu_templates
from app.utils.datetime import utcnow
from app.utils.identifiers import classify_identifier
from app.utils.slugify import base_slug, is_valid_slug, resolve_slug_collision, truncate_slug

logger = logging.getLogger("app.services.menu")


def _with_children():
    return selectinload(Menu.sections).selectinload(MenuSection.items)


async def list_menus_for_user(session: AsyncSession, user_id: uuid.UUID) -> list[tuple[Menu, int]]:
    """List active menus, newest first, paired with their item counts."""
    result = await session.execute(
        select(Menu)
        .where(Menu.user_id == user_id, Menu.deleted_on.is_(None))
        .order_by(Menu.created_at.desc())
    )
    menus = result.scalars().all()
    counts = await _item_counts(session, [menu.id for menu in menus])
    return [(menu, counts.get(menu.id, 0)) for menu in menus]


async def list_deleted_menus(session: AsyncSession, user_id: uuid.UUID) -> list[Menu]:
    """List soft-deleted menus, most recently deleted first."""
    result = await session.execute(
        select(Menu)
        .where(Menu.user_id == user_id, Menu.deleted_on.is_not(None))
        .order_by(Menu.deleted_on.desc())
    )
    return result.scalars().all()


async def get_menu(session: AsyncSession, menu_id: uuid.UUID, *, owner_id: uuid.UUID) -> Menu:
    """Fetch an owner's non-deleted menu with sections and items."""
    result = await session.execute(
        select(Menu)
        .execution_options(populate_existing=True)
        .options(_with_children())
        .where(Menu.id == menu_id, Menu.user_id == owner_id, Menu.deleted_on.is_(None))
    )
    menu = result.scalar_one_or_none()
    if not menu:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return menu


async def create_menu(session: AsyncSession, owner_id: uuid.UUID, payload: MenuCreate) -> Menu:
    """Create a menu with a unique slug and its nested sections/items.

    Implementation notes:
    - The existing-slug snapshot can go stale under concurrent creation; the
      unique constraint catches that and the slug is recomputed.
    """
    # A hard cut can end on a hyphen when the limit is small.
    base = truncate_slug(base_slug(payload.restaurant_name, payload.name), settings.slug_max_length).strip("-")
    if not is_valid_slug(base):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Menu name and restaurant name must produce a valid slug",
        )

    for attempt in range(1, settings.slug_max_attempts + 1):
        existing = await _existing_slugs(session, base)
        slug = resolve_slug_collision(base, existing)
        menu = Menu(
            user_id=owner_id,
            name=payload.name,
            restaurant_name=payload.restaurant_name,
            description=payload.description,
            currency=payload.currency,
            theme_config=payload.theme_config,
            slug=slug,
            sections=_build_sections(payload.sections),
        )
        session.add(menu)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            logger.warning("Slug %s was claimed concurrently (attempt %d)", slug, attempt)
            continue
        logger.info("Created menu %s with slug %s", menu.id, slug)
        return await _load_menu_with_children(session, menu.id)

    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Could not allocate a unique menu slug")


async def update_menu(session: AsyncSession, menu: Menu, payload: MenuUpdate) -> Menu:
    """Replace menu details and rebuild its sections; the slug is kept."""
    menu.name = payload.name
    menu.restaurant_name = payload.restaurant_name
    menu.description = payload.description
    if payload.currency:
        menu.currency = payload.currency
    if "theme_config" in payload.model_fields_set:
        menu.theme_config = payload.theme_config
    # Relies on sections/items being loaded; delete-orphan removes the old rows.
    menu.sections = _build_sections(payload.sections)
    await session.commit()
    return await _load_menu_with_children(session, menu.id)


async def set_published(session: AsyncSession, menu: Menu, is_published: bool) -> Menu:
    """Publish or unpublish a menu."""
    menu.is_published = is_published
    await session.commit()
    logger.info("Menu %s is_published=%s", menu.id, is_published)
    return await _load_menu_with_children(session, menu.id)


async def soft_delete_menu(session: AsyncSession, menu: Menu) -> None:
    """Hide a menu from owners and the public without dropping its rows."""
    menu.deleted_on = utcnow()
    await session.commit()
    logger.info("Soft-deleted menu %s", menu.id)


async def purge_menu(session: AsyncSession, menu_id: uuid.UUID, *, owner_id: uuid.UUID) -> None:
    """Permanently delete a menu that was already soft-deleted."""
    result = await session.execute(
        select(Menu).where(Menu.id == menu_id, Menu.user_id == owner_id, Menu.deleted_on.is_not(None))
    )
    menu = result.scalar_one_or_none()
    if not menu:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    await session.delete(menu)
    await session.commit()
    logger.info("Purged menu %s", menu_id)


async def quick_start(
    session: AsyncSession, owner_id: uuid.UUID, payload: QuickStartRequest
) -> tuple[Menu, str]:
    """Create a menu from a template, falling back to the default template."""
    template = menu_templates.get_template(payload.template_id) or menu_templates.get_template(
        menu_templates.DEFAULT_TEMPLATE_ID
    )
    menu_payload = template.build(currency=payload.currency)
    if payload.override:
        overrides = {
            key: value
            for key, value in payload.override.model_dump(exclude_none=True).items()
            if value.strip()
        }
        menu_payload = MenuCreate.model_validate({**menu_payload.model_dump(), **overrides})
    menu = await create_menu(session, owner_id, menu_payload)
    return menu, template.id


async def import_menu(session: AsyncSession, owner_id: uuid.UUID, payload: MenuImport) -> Menu:
    """Create a menu from an exported document; the payload is already validated."""
    menu = await create_menu(session, owner_id, payload)
    logger.info("Imported menu %s with %d section(s)", menu.id, len(menu.sections))
    return menu


async def get_public_menu(session: AsyncSession, identifier: str) -> Menu | None:
    """Fetch a published menu by id or slug, sections and items in order."""
    result = await session.execute(
        select(Menu)
        .execution_options(populate_existing=True)
        .options(_with_children())
        .where(*_public_menu_filters(identifier))
    )
    return result.scalar_one_or_none()


async def resolve_public_menu_id(session: AsyncSession, identifier: str) -> uuid.UUID | None:
    """Resolve a public id-or-slug identifier to a menu id."""
    result = await session.execute(select(Menu.id).where(*_public_menu_filters(identifier)))
    return result.scalar_one_or_none()


def _public_menu_filters(identifier: str) -> list:
    """Match on the column the identifier names, limited to visible menus."""
    if classify_identifier(identifier) == "id":
        match = Menu.id == uuid.UUID(identifier)
    else:
        match = Menu.slug == identifier
    return [match, Menu.is_published.is_(True), Menu.deleted_on.is_(None)]


def _build_sections(sections: list[MenuSectionInput]) -> list[MenuSection]:
    """Build section/item rows whose sort order follows payload order."""
    return [
        MenuSection(
            name=section.name,
            description=section.description,
            sort_order=section_index,
            items=[
                MenuItem(
                    name=item.name,
                    description=item.description,
                    price=item.price,
                    image_url=item.image_url,
                    is_available=item.is_available,
                    sort_order=item_index,
                )
                for item_index, item in enumerate(section.items)
            ],
        )
        for section_index, section in enumerate(sections)
    ]


async def _existing_slugs(session: AsyncSession, base: str) -> set[str]:
    """Snapshot the stored slugs that could collide with ``base`` or its suffixes."""
    result = await session.execute(
        select(Menu.slug).where(or_(Menu.slug == base, Menu.slug.like(f"{base}-%")))
    )
    return set(result.scalars().all())


async def _item_counts(session: AsyncSession, menu_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    """Count items per menu across all of its sections."""
    if not menu_ids:
        return {}
    result = await session.execute(
        select(MenuSection.menu_id, func.count(MenuItem.id))
        .join(MenuItem, MenuItem.section_id == MenuSection.id)
        .where(MenuSection.menu_id.in_(menu_ids))
        .group_by(MenuSection.menu_id)
    )
    return {menu_id: count for menu_id, count in result.all()}


async def _load_menu_with_children(session: AsyncSession, menu_id: uuid.UUID) -> Menu:
    """Fetch a menu with sections and items preloaded."""
    result = await session.execute(
        select(Menu)
        .execution_options(populate_existing=True)
        .options(_with_children())
        .where(Menu.id == menu_id)
    )
    return result.scalar_one()
