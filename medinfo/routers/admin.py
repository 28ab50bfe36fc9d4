"""Admin authentication and catalog editing endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from medinfo.core.logging import get_logger
from medinfo.core.rate_limiter import rate_limit_ip
from medinfo.repositories.errors import EntryNotFoundError, StorageError
from medinfo.services.catalog_service import EntryInput, InvalidEntryError
from medinfo.services.session_service import (
    AccessGate,
    AdminSession,
    AuthenticationRequiredError,
    InvalidCredentialsError,
    clear_session_cookie,
    session_token,
    set_session_cookie,
)

from .diseases import get_catalog_service

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = get_logger("routers.admin")


class LoginPayload(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class DiseasePayload(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    symptoms: Optional[str] = None
    treatment: Optional[str] = None

    def to_input(self) -> EntryInput:
        return EntryInput(
            name=self.name or "",
            treatment=self.treatment or "",
            description=self.description or "",
            symptoms=self.symptoms or "",
        )


def get_access_gate(request: Request) -> AccessGate:
    gate = getattr(getattr(request.app, "state", None), "access_gate", None)
    if not gate:
        raise RuntimeError("AccessGate not configured")
    return gate


def require_admin(request: Request) -> AdminSession:
    gate = get_access_gate(request)
    try:
        return gate.require_session(session_token(request))
    except AuthenticationRequiredError:
        raise HTTPException(401, "Admin authentication required")


# ---------------------- auth ----------------------
@router.post("/login")
def login(request: Request, payload: Optional[LoginPayload] = None):
    settings = request.app.state.settings
    rate_limit_ip(
        request,
        "admin:login",
        limit=settings.login_rate_limit,
        window_seconds=settings.login_rate_window_seconds,
    )
    gate = get_access_gate(request)
    payload = payload or LoginPayload()
    try:
        token = gate.login(payload.username, payload.password)
    except InvalidCredentialsError:
        raise HTTPException(401, "Invalid credentials")
    except StorageError:
        logger.exception("Login lookup failed")
        raise HTTPException(500, "Server error")
    response = JSONResponse({"success": True, "message": "Login successful"})
    set_session_cookie(response, token, gate.ttl_seconds, secure=settings.app_env == "prod")
    return response


@router.post("/logout")
def logout(request: Request):
    get_access_gate(request).logout(session_token(request))
    response = JSONResponse({"success": True, "message": "Logged out successfully"})
    clear_session_cookie(response)
    return response


@router.get("/check")
def check(request: Request):
    return {"authenticated": get_access_gate(request).is_authenticated(session_token(request))}


# ---------------------- diseases ----------------------
@router.post("/diseases")
def add_disease(payload: DiseasePayload, request: Request, admin: AdminSession = Depends(require_admin)):
    svc = get_catalog_service(request)
    try:
        entry_id = svc.add_entry(payload.to_input())
    except InvalidEntryError as exc:
        raise HTTPException(400, str(exc))
    except StorageError:
        logger.exception("Adding disease failed")
        raise HTTPException(500, "Error adding disease")
    logger.info("Admin %s added disease %s", admin.username, entry_id)
    return {"success": True, "id": entry_id, "message": "Disease added successfully"}


@router.put("/diseases/{entry_id}")
def update_disease(
    entry_id: str,
    payload: DiseasePayload,
    request: Request,
    admin: AdminSession = Depends(require_admin),
):
    svc = get_catalog_service(request)
    try:
        svc.update_entry(entry_id, payload.to_input())
    except InvalidEntryError as exc:
        raise HTTPException(400, str(exc))
    except EntryNotFoundError:
        raise HTTPException(404, "Disease not found")
    except StorageError:
        logger.exception("Updating disease %s failed", entry_id)
        raise HTTPException(500, "Error updating disease")
    logger.info("Admin %s updated disease %s", admin.username, entry_id)
    return {"success": True, "message": "Disease updated successfully"}


@router.delete("/diseases/{entry_id}")
def delete_disease(entry_id: str, request: Request, admin: AdminSession = Depends(require_admin)):
    svc = get_catalog_service(request)
    try:
        svc.delete_entry(entry_id)
    except EntryNotFoundError:
        raise HTTPException(404, "Disease not found")
    except StorageError:
        logger.exception("Deleting disease %s failed", entry_id)
        raise HTTPException(500, "Error deleting disease")
    logger.info("Admin %s deleted disease %s", admin.username, entry_id)
    return {"success": True, "message": "Disease deleted successfully"}
