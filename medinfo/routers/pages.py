from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.templating import Jinja2Templates

from medinfo.repositories.errors import StorageError
from medinfo.core.logging import get_logger

from .diseases import get_catalog_service

router = APIRouter(prefix="", tags=["pages"])
logger = get_logger("routers.pages")


def _templates(request: Request) -> Jinja2Templates:
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


@router.get("/")
def index(request: Request, q: str = ""):
    """Public catalog page; server-rendered so it works without scripts."""
    svc = get_catalog_service(request)
    error = ""
    try:
        entries = svc.search(q)
    except StorageError:
        logger.exception("Rendering catalog failed")
        entries, error = [], "The catalog is unavailable right now."
    return _templates(request).TemplateResponse(
        request,
        "index.html",
        {"entries": [entry.to_dict() for entry in entries], "query": q, "error": error},
    )


@router.get("/admin")
def admin_page(request: Request):
    return _templates(request).TemplateResponse(request, "admin.html", {})
