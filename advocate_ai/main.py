from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time
from contextlib import asynccontextmanager

# Import configuration and database
from .config import settings
from .database import init_db
from .dependencies import set_generative_service
from .exceptions import PersistenceError, UpstreamError, ValidationError

# Import routers
from .routers import ai, auth, drafts

from .services.generative_service import AnthropicGenerativeService

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Advocate AI application...")

    try:
        init_db()
        logger.info("Database initialized")

        set_generative_service(AnthropicGenerativeService())
        logger.info(f"Generative service initialized (model: {settings.claude_model})")

    except Exception as e:
        logger.error(f"Failed to initialize application: {str(e)}")
        raise

    yield

    logger.info("Shutting down Advocate AI application...")
    set_generative_service(None)

# Create FastAPI application
app = FastAPI(
    title="Advocate AI",
    description="AI-assisted legal answers, draft generation and structured extraction",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response

def _debug_detail(exc: Exception):
    """Underlying cause of an error, exposed to clients only in debug mode."""
    if not settings.debug:
        return None
    return str(exc.__cause__ or exc)

# Error handlers
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Caller supplied missing or malformed input."""
    logger.warning(f"Validation error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": exc.message}
    )

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400, naming the offending field."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{field or 'body'}: {error.get('msg')}")
    message = "Invalid request: " + "; ".join(problems)
    logger.warning(f"Request validation error on {request.url.path}: {message}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message}
    )

@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    """The generative service failed or returned an unusable payload."""
    message = exc.message
    if exc.response_fragment is not None:
        message = f"{message} AI response fragment: {exc.response_fragment}..."
    content = {"success": False, "message": message}
    detail = _debug_detail(exc)
    if detail:
        content["error"] = detail
    return JSONResponse(status_code=500, content=content)

@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    """Drafts are either fully saved or not created; failures are reported, never masked."""
    logger.error(f"Persistence error on {request.url.path}: {exc.message}")
    content = {"success": False, "message": exc.message}
    detail = _debug_detail(exc)
    if detail:
        content["error"] = detail
    return JSONResponse(status_code=500, content=content)

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "status_code": exc.status_code,
            "timestamp": time.time()
        },
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.exception(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "status_code": 500,
            "timestamp": time.time()
        }
    )

# Include routers
app.include_router(auth.router, prefix="/api/v1")
app.include_router(ai.router, prefix="/api/v1")
app.include_router(drafts.router, prefix="/api/v1")

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        from sqlalchemy import text
        from .database import SessionLocal
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        db_status = "healthy"
    except Exception:
        db_status = "unhealthy"

    from .dependencies import generative_service
    ai_status = "healthy" if generative_service else "not_initialized"

    overall_status = "healthy" if db_status == ai_status == "healthy" else "degraded"

    return {
        "status": overall_status,
        "timestamp": time.time(),
        "version": "1.0.0",
        "services": {
            "database": db_status,
            "ai": ai_status
        }
    }

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Advocate AI API",
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Documentation not available in production",
        "health": "/health",
        "endpoints": [
            "/api/v1/ai/chat",
            "/api/v1/ai/draft",
            "/api/v1/ai/extract",
            "/api/v1/drafts"
        ]
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "advocate_ai.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
