"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from acquisitions.api import router as api_router
from acquisitions.core.config import settings
from acquisitions.core.logging_config import AccessLogMiddleware, configure_logging

configure_logging(settings)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

app = FastAPI(
    title="Acquisitions API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AccessLogMiddleware)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def _field_path(loc: tuple) -> str:
    """Render a pydantic error location without the leading 'body'/'path' segment."""
    parts = [str(p) for p in loc]
    if parts and parts[0] in ("body", "path", "query", "cookie", "header"):
        parts = parts[1:]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with field-level detail when the body or path parameters fail validation."""
    details = [
        {"field": _field_path(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": <status phrase>, "message": <detail>}."""
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": phrase, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures with full detail; the caller only gets a generic message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # Built outside the middleware stack, so the security headers are added here
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=SECURITY_HEADERS,
    )


app.include_router(api_router)


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    """Root route; minimal payload for discovery."""
    logger.info("Hello from Acquisitions!")
    return "Hello from Acquisitions!"
