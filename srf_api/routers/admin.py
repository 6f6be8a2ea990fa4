from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from srf_api.core.rate_limiter import rate_limit_ip
from srf_api.routers import app_service, json_body
from srf_api.services.admin_service import AdminAuthError, AdminService
from srf_api.services.session_service import (
    clear_session_cookie,
    set_session_cookie,
    token_from_request,
)

router = APIRouter(prefix="/admin", tags=["admin"])


def _service(request: Request) -> AdminService:
    return app_service(request, "admin_service")


@router.post("/login")
def login(request: Request, payload: dict[str, Any] = Depends(json_body)):
    svc = _service(request)
    rate_limit_ip(
        request,
        "admin-login",
        limit=10,
        window_seconds=60,
        trust_forwarded=svc.settings.trust_proxy_headers,
    )
    try:
        token = svc.login(payload.get("id"), payload.get("password"))
    except AdminAuthError as exc:
        return JSONResponse({"success": False, "message": str(exc)}, status_code=401)
    resp = JSONResponse({"success": True, "message": "Login successful", "token": token})
    set_session_cookie(resp, token, svc.settings.admin_session_ttl_seconds)
    return resp


@router.post("/logout")
def logout(request: Request):
    _service(request).logout(token_from_request(request))
    resp = JSONResponse({"success": True})
    clear_session_cookie(resp)
    return resp


@router.get("/data")
def data(request: Request):
    svc = _service(request)
    try:
        svc.authorize(token_from_request(request))
    except AdminAuthError as exc:
        return JSONResponse({"success": False, "message": str(exc)}, status_code=401)
    return svc.collect()
