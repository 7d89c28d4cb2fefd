from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.config import Settings, settings as default_settings
from app.runtime import GameRuntime

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    runtime: GameRuntime | None = None,
) -> FastAPI:
    app_settings = settings or default_settings
    app = FastAPI(title="Clavier Ninja Backend", version="1.0.0")
    app.state.settings = app_settings
    app.state.runtime = runtime or GameRuntime(app_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.on_event("startup")
    async def on_startup() -> None:
        logger.info("Clavier Ninja server ready on port %s", app_settings.port)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await app.state.runtime.shutdown()

    return app
