from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CONFIG
from .context import AppContext
from .routes import accounts as account_routes
from .routes import chats as chat_routes
from .routes import matches as match_routes
from .routes import profiles as profile_routes
from .routes import widgets as widget_routes

logger = logging.getLogger(__name__)


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    context = context or AppContext.open(CONFIG)
    logging.basicConfig(level=context.config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.context.close()

    app = FastAPI(
        title="CareMatch API",
        version="0.1.0",
        description="Local accounts, matches, chats and dashboards for parents and nannies",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )

    app.include_router(account_routes.router)
    app.include_router(profile_routes.router)
    app.include_router(chat_routes.router)
    app.include_router(match_routes.router)
    app.include_router(widget_routes.router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


def __getattr__(name: str) -> FastAPI:
    # The served app opens the configured database, so build it on first access.
    if name == "app":
        globals()["app"] = create_app()
        return globals()["app"]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
