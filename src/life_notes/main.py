from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging_config import get_logger, setup_logging
from .routers import health as health_router
from .routers import notes as notes_router
from .routers import todos as todos_router
from .settings import get_settings

logger = get_logger("main")

openapi_tags = [
    {"name": "health", "description": "Service health, readiness and liveness endpoints."},
    {"name": "notes", "description": "CRUD operations for notes with tag, pinned and text filters."},
    {
        "name": "todos",
        "description": "CRUD operations for typed todos with filtering, sorting and completion toggling.",
    },
]

# Validation errors whose message already names the problem.
_SELF_DESCRIBING_ERRORS = {"title_required", "invalid_todo_type"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    base_url = f"http://localhost:{settings.port}"
    logger.info("Life Notes API running on %s", base_url)
    logger.info("Environment: %s", settings.environment)
    logger.info("Health check: %s/api/health", base_url)
    logger.info("Notes API: %s/api/notes", base_url)
    logger.info("Todos API: %s/api/todos", base_url)
    yield
    logger.info("Life Notes API shutting down")


app = FastAPI(
    title="Life Notes API",
    description="Backend API for notes and typed todos kept in process memory.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

_settings = get_settings()

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=not allow_all,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(message: str, **extra: Any) -> Dict[str, Any]:
    error: Dict[str, Any] = {"message": message}
    error.update(extra)
    return {"success": False, "error": error}


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """
    Join pydantic/fastapi error entries into one readable message, e.g.
    "Title is required; priority: Input should be 'low', 'medium', 'high' or 'urgent'".
    """
    parts: List[str] = []
    for err in errors:
        msg = str(err.get("msg", "Invalid value"))
        if err.get("type") in _SELF_DESCRIBING_ERRORS:
            parts.append(msg)
            continue
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Request validation failed"


# Global exception handlers for a consistent JSON envelope
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return 400 with the error envelope for request validation errors.

    Response format:
        {
            "success": false,
            "error": {
                "message": "Title is required",
                "details": [... pydantic/fastapi error details ...]
            }
        }
    """
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(describe_validation_errors(errors), details=jsonable_encoder(errors)),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Wrap HTTP errors, including unmatched routes, in the error envelope.
    """
    message = str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.method} {request.url.path} not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Return JSON for unexpected errors.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Service Banner", tags=["health"])
def root() -> Dict[str, Any]:
    """
    Root endpoint naming the service.

    Returns:
        A JSON object with the service name and environment.
    """
    return {"success": True, "message": "Life Notes API", "environment": _settings.environment}


# Include routers
app.include_router(health_router.router)
app.include_router(notes_router.router)
app.include_router(todos_router.router)
