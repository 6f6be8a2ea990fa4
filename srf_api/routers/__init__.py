"""
FastAPI routers grouped by domain (public forms, admin).

Each module exposes an APIRouter included by srf_api.app.create_app. Services
are looked up on app.state so tests can swap the store.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request


async def json_body(request: Request) -> dict[str, Any]:
    """Request body as a dict; a missing or malformed body counts as empty."""
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def app_service(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if svc is None:
        raise RuntimeError(f"{name} not configured")
    return svc
