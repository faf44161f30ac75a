"""FastAPI application factory.

Creates the app with CORS, routers, error handlers, and OpenAPI metadata.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config_loader import get_cors_origins
from services.exceptions import (
    ResumeAIError,
    MissingInputError,
    UnreadableUploadError,
    UploadTooLargeError,
    OracleConfigError,
    OracleUnavailableError,
    OracleResponseUnparseableError,
    GenerationFailedError,
    ValidationError,
    AuthenticationError,
    UserExistsError,
)

from .dependencies import get_config
from .routers import ats, auth, pdf, resume

logger = logging.getLogger(__name__)

# Map service exceptions to HTTP status codes
EXCEPTION_STATUS_MAP = {
    MissingInputError: 400,
    UnreadableUploadError: 400,
    ValidationError: 422,
    UploadTooLargeError: 413,
    AuthenticationError: 401,
    UserExistsError: 409,
    OracleConfigError: 502,
    OracleResponseUnparseableError: 502,
    OracleUnavailableError: 503,
    GenerationFailedError: 500,
}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("ResumeAI API starting")
        yield
        # Shutdown (nothing to clean up)

    app = FastAPI(
        title="ResumeAI API",
        description="Resume builder with PDF export and AI-powered ATS scoring",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS: configured front-end origins plus localhost on any port
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(config),
        allow_origin_regex=r"https?://localhost(:\d+)?",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount routers under /api
    prefix = "/api"
    app.include_router(auth.router, prefix=prefix, tags=["Auth"])
    app.include_router(pdf.router, prefix=prefix, tags=["PDF"])
    app.include_router(resume.router, prefix=prefix, tags=["Resume"])
    app.include_router(ats.router, prefix=prefix, tags=["ATS"])

    # Global exception handler for service-layer errors
    @app.exception_handler(ResumeAIError)
    async def resume_ai_error_handler(request: Request, exc: ResumeAIError):
        status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc)},
        )

    # Health check (no auth)
    @app.get("/health", tags=["System"])
    async def health():
        return {"status": "ok"}

    @app.get("/", tags=["System"])
    async def root():
        return {
            "message": "ResumeAI API is running",
            "version": app.version,
            "endpoints": {
                "auth": f"{prefix}/auth",
                "pdf": f"{prefix}/pdf/generate",
                "docx": f"{prefix}/resume/docx",
                "preview": f"{prefix}/resume/preview",
                "ats": f"{prefix}/ats/analyze",
            },
        }

    return app
