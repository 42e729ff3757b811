"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from siege.api.dependencies import set_game_manager
from siege.api.game_manager import GameManager
from siege.api.routes import api_router
from siege.config import SiegeConfig
from siege.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SiegeConfig | None = None, api_key: str | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SiegeConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = GameManager(_config, api_key=api_key)
        set_game_manager(manager)
        logger.info("API server started; waiting for the draft.")
        yield
        manager.shutdown()
        set_game_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Commander Siege",
        description=(
            "Turn-based siege simulator driven by AI-personality commanders.\n\n"
            "## API Groups\n\n"
            "- **State**: live siege state and the turn log\n"
            "- **Phases**: draft, curate, teach, intermission orders, debrief\n"
            "- **Control**: start, pause, resume, step, fast-forward, reset\n"
            "- **Config**: read-only siege configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live siege state polled by the frontend: structures, attackers, commanders, events."},
            {"name": "Phases", "description": "Phase flow: draft commanders, curate structures, teach the opening order, give intermission orders, read the debrief."},
            {"name": "Control", "description": "Turn controls: start, pause, resume, single-step, fast-forward and reset."},
            {"name": "Config", "description": "Read-only siege configuration and the commander roster."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
