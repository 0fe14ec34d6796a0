from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from logging.config import dictConfig

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from .api.v1.debug import router as debug_router
from .api.v1.health import router as health_router
from .api.v1.media import router as media_router
from .api.v1.projects import router as projects_router
from .api.v1.roles import router as roles_router
from .api.v1.site_settings import router as settings_router
from .core.config import settings
from .core.logging_config import APP_LOGGER, get_log_config, resolve_level
from .core.state import ServiceState
from .db.session import Base, engine

# Apply logging configuration as early as possible (module import time)
dictConfig(get_log_config())

logger = logging.getLogger(APP_LOGGER)

tags_metadata = [
    {"name": "health", "description": "Health checks and basic service info."},
    {"name": "projects", "description": "Portfolio projects and their resolved video players."},
    {"name": "media", "description": "Media library, hosted video registration and duplicate detection."},
    {"name": "roles", "description": "User roles synced from identity provider metadata."},
    {"name": "settings", "description": "Site-wide key/value settings."},
    {"name": "debug", "description": "Video resolution diagnostics and recent logs."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    level = resolve_level()
    dictConfig(get_log_config(level))

    services = ServiceState(log_buffer_max_lines=settings.log_buffer_max_lines)
    services.initialize(level=level)
    app.state.services = services

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(
        "%s %s started (database=%s)",
        settings.app_name,
        settings.version,
        engine.url.render_as_string(hide_password=True),
    )
    try:
        yield
    finally:
        services.shutdown()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description=(
        "API behind the portfolio site: projects, media library and hosted video"
        " resolution (YouTube, Vimeo, LinkedIn) with embed and thumbnail URLs."
    ),
    openapi_tags=tags_metadata,
    # Serve docs under /api/* to match API prefix
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    contact={"name": settings.app_name},
    license_info={"name": "MIT"},
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api/v1")
app.include_router(projects_router, prefix="/api/v1")
app.include_router(media_router, prefix="/api/v1")
app.include_router(roles_router, prefix="/api/v1")
app.include_router(settings_router, prefix="/api/v1")
app.include_router(debug_router, prefix="/api/v1")


@app.get("/api")
def api_root():
    return {"name": settings.app_name, "version": settings.version}


# Convenience redirects for default FastAPI docs paths
@app.get("/docs", include_in_schema=False)
async def docs_redirect():
    return RedirectResponse(url="/api/docs")


@app.get("/redoc", include_in_schema=False)
async def redoc_redirect():
    return RedirectResponse(url="/api/redoc")
