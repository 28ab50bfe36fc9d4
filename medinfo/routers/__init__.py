"""
FastAPI routers grouped by audience (public catalog, admin, HTML pages).

Each file inside this package exposes an APIRouter that is included in the
main application (app.py). Routers fetch their services from ``app.state``.
"""
