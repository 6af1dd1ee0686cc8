"""Shared helpers for API tests."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from httpx import AsyncClient

from app.core.security import create_access_token


@dataclass(slots=True)
class AuthContext:
    """Authenticated client context for API tests."""

    client: AsyncClient
    user_id: uuid.UUID
    email: str

    @property
    def headers(self) -> dict[str, str]:
        token = create_access_token(str(self.user_id), email=self.email)
        return {"Authorization": f"Bearer {token}"}


def authenticate(client: AsyncClient, *, prefix: str = "owner") -> AuthContext:
    """Build an auth context for a fresh provider user."""
    user_id = uuid.uuid4()
    email = f"{prefix}_{user_id.hex[:8]}@example.com"
    return AuthContext(client=client, user_id=user_id, email=email)


def menu_payload(name: str = "Dinner", restaurant_name: str = "Test Restaurant", **extra: Any) -> dict[str, Any]:
    """Minimal menu body with one section and two items."""
    payload: dict[str, Any] = {
        "name": name,
        "restaurant_name": restaurant_name,
        "description": "Evening service",
        "currency": "USD",
        "sections": [
            {
                "name": "Mains",
                "items": [
                    {"name": "Steak", "price": 24.5},
                    {"name": "Risotto", "price": 18.0, "is_available": False},
                ],
            }
        ],
    }
    payload.update(extra)
    return payload


async def create_menu(ctx: AuthContext, **kwargs: Any) -> dict[str, Any]:
    res = await ctx.client.post("/api/menus", json=menu_payload(**kwargs), headers=ctx.headers)
    assert res.status_code == 201, res.text
    return res.json()


async def create_published_menu(ctx: AuthContext, **kwargs: Any) -> dict[str, Any]:
    menu = await create_menu(ctx, **kwargs)
    res = await ctx.client.patch(
        f"/api/menus/{menu['id']}/publish", json={"is_published": True}, headers=ctx.headers
    )
    assert res.status_code == 200, res.text
    return res.json()
