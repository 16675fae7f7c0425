"""
Doozip Backend API
FastAPI application for inspecting zip archives, building zip archives from
uploaded files, and emailing documents.

Run with: uvicorn app.main:app --reload   (from the backend/ directory)
"""

import logging
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, get_settings
from app.logging_config import setup_logging
from app.routers import archive, mail

settings = get_settings()
setup_logging(settings.environment)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Doozip API",
    description="Zip archive inspection, archive creation and document mailing",
    version=settings.app_version,
)


def get_cors_origins(settings: Settings) -> List[str]:
    """
    Build the list of allowed CORS origins.

    Always includes the local frontend dev server (http://localhost:3000).
    Additional origins come from the CORS_ORIGINS environment variable as a
    comma-separated list. Duplicates are removed while preserving order.
    """
    always_included = ["http://localhost:3000"]

    seen: set = set()
    origins: List[str] = []
    for origin in always_included + settings.cors_origins:
        if origin not in seen:
            seen.add(origin)
            origins.append(origin)

    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(settings),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(archive.router, prefix="/api/archive", tags=["archive"])
app.include_router(mail.router, prefix="/api/mail", tags=["mail"])


@app.on_event("startup")
async def log_startup() -> None:
    logger.info(
        "%s %s started (environment=%s, address=%s)",
        settings.app_name,
        settings.app_version,
        settings.environment,
        settings.address,
    )


@app.get("/")
async def root():
    return {"message": "Doozip API", "version": settings.app_version}


@app.get("/health")
async def health():
    return {"status": "ok"}


def run() -> None:
    """Console entry point: serve the app with uvicorn on SERVER_HOST:SERVER_PORT."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=logging.getLevelName(logging.getLogger().level).lower(),
    )


if __name__ == "__main__":
    run()
