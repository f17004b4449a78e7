"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy import text

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.metrics import build_metrics_response, instrument_http_request
from app.modules.admin.router import router as admin_router
from app.modules.booking.router import router as booking_router
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.router import router as identity_router
from app.modules.identity.service import IdentityService
from app.modules.notifications.router import router as notifications_router
from app.modules.studios.router import router as studios_router
from app.shared.exceptions import register_exception_handlers
from app.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


def _landing_page_html() -> str:
    """Build minimal landing page for root path."""
    studio_items = "\n".join(
        f"          <li>{studio.name}: {', '.join(studio.session_labels)}</li>"
        for studio in settings.studios
    )
    return f"""
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{settings.app_name} API</title>
    <style>
      body {{
        margin: 0;
        font-family: "Segoe UI", Arial, sans-serif;
        background: #f5f7fb;
        color: #1f2933;
      }}
      .container {{
        max-width: 820px;
        margin: 48px auto;
        padding: 0 20px;
      }}
      .card {{
        background: #ffffff;
        border: 1px solid #dfe5ec;
        border-radius: 14px;
        padding: 28px;
      }}
      h1 {{
        margin: 0 0 12px;
      }}
      .links {{
        margin-top: 20px;
        display: flex;
        flex-wrap: wrap;
        gap: 10px;
      }}
      .links a {{
        text-decoration: none;
        border: 1px solid #c8d3de;
        border-radius: 8px;
        padding: 8px 12px;
        color: #1d4e89;
      }}
      code {{
        background: #eef2f6;
        border-radius: 6px;
        padding: 3px 6px;
      }}
    </style>
  </head>
  <body>
    <main class="container">
      <section class="card">
        <h1>{settings.app_name} API</h1>
        <p>Studio booking backend is running. Requests are reviewed by an admin before approval.</p>
        <ul>
{studio_items}
        </ul>
        <div class="links">
          <a href="/docs">API docs</a>
          <a href="/health">Health</a>
          <a href="/ready">Ready</a>
          <a href="/metrics">Metrics</a>
        </div>
        <p>API prefix: <code>{settings.api_prefix}</code></p>
      </section>
    </main>
  </body>
</html>
"""


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s with %d studios", settings.app_name, len(settings.studios))

    if settings.bootstrap_admin_email and settings.bootstrap_admin_password:
        async with SessionLocal() as session:
            try:
                service = IdentityService(IdentityRepository(session))
                await service.ensure_bootstrap_admin(
                    settings.bootstrap_admin_email,
                    settings.bootstrap_admin_password,
                )
                await session.commit()
            except Exception:
                await session.rollback()
                logger.exception("Failed during startup initialization")
                raise

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

app.include_router(studios_router, prefix=settings.api_prefix)
app.include_router(booking_router, prefix=settings.api_prefix)
app.include_router(identity_router, prefix=settings.api_prefix)
app.include_router(notifications_router, prefix=settings.api_prefix)
app.include_router(admin_router, prefix=settings.api_prefix)


@app.get("/", include_in_schema=False, response_class=HTMLResponse)
async def landing_page() -> HTMLResponse:
    """Root page with quick navigation links."""
    return HTMLResponse(content=_landing_page_html())


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "ok"}


async def _is_database_ready() -> bool:
    """Return True if DB accepts basic queries."""
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database readiness check failed")
        return False


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Readiness probe endpoint with DB dependency check."""
    if not await _is_database_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not ready",
        )
    return {
        "status": "ready",
        "database": "ok",
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
