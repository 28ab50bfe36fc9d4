"""Public read-only catalog endpoints."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from medinfo.core.logging import get_logger
from medinfo.repositories.errors import StorageError
from medinfo.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["diseases"])
logger = get_logger("routers.diseases")


def get_catalog_service(request: Request) -> CatalogService:
    svc = getattr(getattr(request.app, "state", None), "catalog_service", None)
    if not svc:
        raise RuntimeError("CatalogService not configured")
    return svc


@router.get("/diseases")
def list_diseases(request: Request):
    svc = get_catalog_service(request)
    try:
        entries = svc.list_entries()
    except StorageError:
        logger.exception("Listing diseases failed")
        raise HTTPException(500, "Error fetching diseases")
    return [entry.to_dict() for entry in entries]


@router.get("/diseases/{entry_id}")
def get_disease(entry_id: str, request: Request):
    svc = get_catalog_service(request)
    try:
        entry = svc.get_entry(entry_id)
    except StorageError:
        logger.exception("Fetching disease %s failed", entry_id)
        raise HTTPException(500, "Error fetching disease")
    if entry is None:
        raise HTTPException(404, "Disease not found")
    return entry.to_dict()


@router.get("/search")
def search_diseases(request: Request, q: str = ""):
    svc = get_catalog_service(request)
    try:
        entries = svc.search(q)
    except StorageError:
        logger.exception("Searching diseases failed")
        raise HTTPException(500, "Error searching diseases")
    return [entry.to_dict() for entry in entries]
