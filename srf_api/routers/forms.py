from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from srf_api.core.rate_limiter import rate_limit_ip
from srf_api.routers import app_service, json_body
from srf_api.services.submission_service import StorageError, SubmissionService, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["forms"])

SAVE_FAILED = "Could not save your submission. Please try again later."


def _service(request: Request) -> SubmissionService:
    return app_service(request, "submission_service")


def _limit(request: Request) -> None:
    settings = request.app.state.settings
    rate_limit_ip(
        request,
        "forms",
        limit=settings.form_rate_limit,
        window_seconds=60,
        trust_forwarded=settings.trust_proxy_headers,
    )


def _bad_request(exc: ValidationError) -> JSONResponse:
    return JSONResponse({"message": exc.message}, status_code=400)


def _save_failed(form: str) -> JSONResponse:
    logger.error("Could not persist %s submission", form)
    return JSONResponse({"message": SAVE_FAILED}, status_code=500)


@router.post("/donate")
def donate(request: Request, payload: dict[str, Any] = Depends(json_body)):
    _limit(request)
    try:
        _, count = _service(request).submit_donation(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    except StorageError:
        return _save_failed("donation")
    return {"message": "Donation submitted successfully!", "count": count}


@router.get("/donate/count")
def donation_count(request: Request):
    return {"count": _service(request).donation_count()}


@router.post("/volunteer")
def volunteer(request: Request, payload: dict[str, Any] = Depends(json_body)):
    _limit(request)
    try:
        _service(request).submit_volunteer(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    except StorageError:
        return _save_failed("volunteer")
    return {"message": "Volunteer form submitted successfully!"}


@router.post("/newsletter")
def newsletter(request: Request, payload: dict[str, Any] = Depends(json_body)):
    _limit(request)
    try:
        _service(request).subscribe_newsletter(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    except StorageError:
        return _save_failed("newsletter")
    return {"message": "Subscribed successfully!"}


@router.post("/contact")
def contact(request: Request, payload: dict[str, Any] = Depends(json_body)):
    _limit(request)
    try:
        _service(request).submit_contact(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    except StorageError:
        return _save_failed("contact")
    return {"message": "Contact form submitted successfully!"}
