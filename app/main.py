"""Agate AI — FastAPI Application Entry Point.

AI assistant for the Agate campaign-management system: campaign suggestions,
creative ideas and their PDF exports. Run with:

    uvicorn app.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.ai_routes import router as ai_router
from app.config import settings
from app.core.audit import AuditMiddleware
from app.core.logging import get_logger
from app.database import backend_name, db_url, init_db, mask_url, test_connection

logger = get_logger("main")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Agate AI {VERSION} starting (provider: {settings.ai_provider})")
    if settings.mock_mode:
        logger.warning("⚠️  AI_API_KEY not set — suggestions will be mock responses")

    if test_connection():
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected — AI endpoints will return 500")
    yield
    logger.info("Agate AI shut down")


app = FastAPI(
    title="Agate AI",
    description=(
        "AI assistant for campaign managers and creative staff: campaign analysis, "
        "creative ideas and PDF reports."
    ),
    version=VERSION,
    lifespan=lifespan,
)

# AuditMiddleware is added last, so it is outermost
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AuditMiddleware)

app.include_router(ai_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400), not 422."""
    logger.warning(
        f"Rejected request body on {request.url.path}",
        extra={"route": request.url.path, "status_code": 400},
    )
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.get("/health", tags=["System"])
async def health_check():
    return {
        "status": "healthy",
        "service": "agate-ai",
        "version": VERSION,
        "provider": settings.ai_provider,
        "mock_mode": settings.mock_mode,
    }


@app.get("/debug/db", tags=["System"])
async def debug_db():
    """Database connectivity and backend, password masked."""
    return {
        "connected": test_connection(),
        "backend": backend_name(db_url),
        "url": mask_url(db_url),
    }
