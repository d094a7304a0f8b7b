"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from common.config import get_config
from common.errors import (
    CandidatesNotFoundError,
    ClusterNotFoundError,
    InvalidWindowDateError,
    ReorderRejectedError,
    StorageError,
)
from editor_api.routers import candidates, clusters, health, rank

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Story Engine Editor API",
    description="Run clustering and ranking, review candidates and pick representative articles",
    version="1.0.0",
)

# Register routers
app.include_router(health.router)
app.include_router(clusters.router)
app.include_router(rank.router)
app.include_router(candidates.router)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(InvalidWindowDateError)
@app.exception_handler(ReorderRejectedError)
async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error(400, exc)


@app.exception_handler(CandidatesNotFoundError)
@app.exception_handler(ClusterNotFoundError)
async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error(404, exc)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return _error(500, exc)


@app.get("/")
async def root():
    """API root - returns basic info."""
    return {
        "name": "Story Engine Editor API",
        "version": "1.0.0",
        "docs": "/docs",
    }


def main():
    """Run the API server."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "editor_api.main:app",
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
