"""
SmartBlasts - FastAPI Backend
REST API for accounts, contacts, drip campaigns, templates, automation rules,
analytics, plans, admin and white label vendors.

Run: uvicorn smartblasts.api.app:app --reload --port 8000
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from smartblasts.config import API_HOST, API_PORT, CORS_ORIGINS
from smartblasts.db import connection
from smartblasts.api.routers import (
    admin, analytics, auth, automation, campaigns, contacts, plans, profile, templates, white_label,
)
from smartblasts.errors import SmartBlastsError
from smartblasts.logging_config import log_request, setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SmartBlasts",
    description="B2B drip campaign platform API: contacts, sequences, templates and analytics.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_timing(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    log_request(request.method, request.url.path, response.status_code,
                (time.perf_counter() - started) * 1000,
                user_id=getattr(request.state, "user_id", None))
    return response


@app.exception_handler(SmartBlastsError)
async def smartblasts_error_handler(request: Request, exc: SmartBlastsError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# ─── ROUTERS ─────────────────────────────────────────────────
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(contacts.router)
app.include_router(campaigns.router)
app.include_router(templates.router)
app.include_router(automation.router)
app.include_router(analytics.router)
app.include_router(plans.router)
app.include_router(admin.router)
app.include_router(white_label.router)


# ─── HEALTH ──────────────────────────────────────────────────

@app.get("/api/health")
def health():
    try:
        with connection.get_db_conn() as conn:
            tables = conn.execute(
                "SELECT COUNT(*) FROM sqlite_master WHERE type='table'"
            ).fetchone()[0]
        return {
            "status": "healthy",
            "tables": tables,
            "db_path": connection.DB_PATH,
        }
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(status_code=500, content={"status": "unhealthy", "error": str(e)})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
