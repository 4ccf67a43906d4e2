"""
FastAPI routers grouped by domain (auth, profile, tasks).

Each module exposes an APIRouter included by the application factory in
taskapi.app.
"""
