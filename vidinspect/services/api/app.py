from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vidinspect.common.logging import configure_logging
from vidinspect.common.settings import get_settings
from vidinspect.services.api.routers import health, inspect

cfg = get_settings()
dev = cfg.app_env.lower() == "development"


def create_app() -> FastAPI:
    configure_logging(cfg.log_level)
    app = FastAPI(
        title="vidinspect API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
    )

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    # CORS (the desktop webview calls from its own origin)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
    )

    # Routers
    app.include_router(health.router)
    app.include_router(inspect.router)
    return app

app = create_app()
