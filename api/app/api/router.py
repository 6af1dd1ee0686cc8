"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import menus, public, qr_codes

api_router = APIRouter()
api_router.include_router(menus.router, prefix="/menus", tags=["menus"])
api_router.include_router(qr_codes.router, prefix="/menus", tags=["qr-codes"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
