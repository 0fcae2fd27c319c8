"""FastAPI application factory."""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kolviz.api import dependencies
from kolviz.api.repository import LogRepository
from kolviz.api.routes import log, summary, turns
from kolviz.api.schemas import StatusResponse
from kolviz.core.log_data import LogData
from kolviz.core.summary import LogSummary
from kolviz.version import __version__


def create_app(
    log_data: LogData,
    log_summary: LogSummary,
    log_path: Optional[Path] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        log_data: Finalized log data to serve
        log_summary: Summary computed from the log data
        log_path: Path of the parsed log, shown in the status

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="KolViz API",
        description="Read-only access to a parsed KoLmafia ascension log",
        version=__version__,
    )

    # CORS middleware for local chart frontends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    repo = LogRepository(log_data, log_summary)

    # Dependency override for repository injection
    def get_repository() -> LogRepository:
        return repo

    app.dependency_overrides[dependencies.get_repository] = get_repository

    # Include routers
    app.include_router(turns.router)
    app.include_router(log.router)
    app.include_router(summary.router)

    app.state.repo = repo
    app.state.log_path = log_path

    @app.get("/api/status", response_model=StatusResponse, tags=["status"])
    def get_status() -> StatusResponse:
        """Get server status and the facts of the served log."""
        return StatusResponse(
            status="ok",
            version=__version__,
            log_name=log_data.log_name,
            log_path=str(log_path) if log_path else None,
            is_detailed=log_data.is_detailed,
            parsed_log_creator=log_data.parsed_log_creator.name,
            character_class=log_data.character_class.display_name,
            game_mode=log_data.game_mode.value,
            ascension_path=log_data.ascension_path.value,
            last_turn_number=log_data.last_turn_number,
            day_count=len(log_data.day_changes),
        )

    return app
