"""
FastAPI API Server.

REST API over the fact-find extraction engine.

Start with:
    uvicorn factfind.api_server:app --reload --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv
load_dotenv(".env.local")

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from factfind.api.extraction import router as extraction_router
from factfind.api.middleware import RequestIdMiddleware
from factfind.config import get_settings
from factfind.exceptions import FactFindError
from factfind.logging_config import get_logger, setup_logging
from factfind.services.data_extraction import get_extraction_service

setup_logging()
settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle hooks."""
    service = get_extraction_service()
    logger.info(
        "api_server_starting",
        environment=settings.environment.value,
        extractors=len(service.registry),
        mappings=len(service.mappings),
    )
    yield
    logger.info("api_server_stopping")


app = FastAPI(
    title="Fact-Find Extraction API",
    description="Rule-based field extraction for conversational financial fact-finds",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware (outermost last)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(extraction_router)


@app.exception_handler(FactFindError)
async def factfind_error_handler(request: Request, exc: FactFindError) -> JSONResponse:
    logger.warning(
        "request_failed",
        path=request.url.path,
        error=exc.message,
        status=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "service": settings.service_name}


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """API root."""
    return {
        "service": "Fact-Find Extraction",
        "version": "0.1.0",
        "docs": "/docs",
    }
