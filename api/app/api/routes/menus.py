"""Menu endpoints for owner-facing menu management."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, get_current_user, get_db
from app.models.menu import Menu
from app.schema.menu import (
    DeletedMenusRead,
    MenuCreate,
    MenuImport,
    MenuImportRead,
    MenuListItemRead,
    MenuPublish,
    MenuRead,
    MenuSummaryRead,
    MenuTemplateRead,
    MenuUpdate,
    QuickStartRead,
    QuickStartRequest,
)
from app.services import menu_service, menu_templates

router = APIRouter()


@router.get("", response_model=list[MenuListItemRead])
async def list_menus(
    session: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)
) -> list[MenuListItemRead]:
    """List menus for the current user with item counts."""
    rows = await menu_service.list_menus_for_user(session, current_user.id)
    return [
        MenuListItemRead.model_validate(menu).model_copy(update={"items_count": count})
        for menu, count in rows
    ]


@router.post("", response_model=MenuRead, status_code=status.HTTP_201_CREATED)
async def create_menu_endpoint(
    payload: MenuCreate,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Menu:
    """Create a menu for the current user."""
    return await menu_service.create_menu(session, current_user.id, payload)


@router.get("/deleted", response_model=DeletedMenusRead)
async def list_deleted_menus(
    session: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)
) -> DeletedMenusRead:
    """List soft-deleted menus for the current user."""
    menus = await menu_service.list_deleted_menus(session, current_user.id)
    return DeletedMenusRead(
        menus=[MenuSummaryRead.model_validate(menu) for menu in menus], total=len(menus)
    )


@router.get("/templates", response_model=list[MenuTemplateRead])
async def list_menu_templates(
    current_user: CurrentUser = Depends(get_current_user),
) -> list[MenuTemplateRead]:
    """List the starter templates available for quick start."""
    return [
        MenuTemplateRead(
            id=template.id,
            label=template.label,
            description=template.description,
            tags=list(template.tags),
        )
        for template in menu_templates.list_templates()
    ]


@router.post("/quick-start", response_model=QuickStartRead, status_code=status.HTTP_201_CREATED)
async def quick_start_endpoint(
    payload: QuickStartRequest,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> QuickStartRead:
    """Create a menu from a starter template."""
    menu, template_id = await menu_service.quick_start(session, current_user.id, payload)
    return QuickStartRead(menu=MenuRead.model_validate(menu), template_id=template_id)


@router.post("/import", response_model=MenuImportRead, status_code=status.HTTP_201_CREATED)
async def import_menu_endpoint(
    payload: MenuImport,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> MenuImportRead:
    """Create a menu from a complete exported menu document."""
    menu = await menu_service.import_menu(session, current_user.id, payload)
    return MenuImportRead(menu=MenuRead.model_validate(menu))


@router.get("/{menu_id}", response_model=MenuRead)
async def get_menu_endpoint(
    menu_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Menu:
    """Fetch a menu by ID."""
    return await menu_service.get_menu(session, menu_id, owner_id=current_user.id)


@router.put("/{menu_id}", response_model=MenuRead)
async def update_menu_endpoint(
    menu_id: uuid.UUID,
    payload: MenuUpdate,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Menu:
    """Replace menu details, sections, and items."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    return await menu_service.update_menu(session, menu, payload)


@router.delete(
    "/{menu_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_menu_endpoint(
    menu_id: uuid.UUID,
    permanent: bool = Query(default=False),
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> None:
    """Soft-delete a menu, or purge one that is already soft-deleted."""
    if permanent:
        await menu_service.purge_menu(session, menu_id, owner_id=current_user.id)
        return
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    await menu_service.soft_delete_menu(session, menu)


@router.patch("/{menu_id}/publish", response_model=MenuRead)
async def publish_menu_endpoint(
    menu_id: uuid.UUID,
    payload: MenuPublish,
    session: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Menu:
    """Publish or unpublish a menu."""
    menu = await menu_service.get_menu(session, menu_id, owner_id=current_user.id)
    return await menu_service.set_published(session, menu, payload.is_published)


@router.patch("/{menu_id}/restore", response_model=None)
async def restore_menu_endpoint(
    menu_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> None:
    """Restoring deleted menus is reserved for support staff."""
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Menu restoration is not allowed for users")
