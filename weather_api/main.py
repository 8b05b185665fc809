import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from weather_api.config import settings
from weather_api.routers import health, weather
from weather_api.domain.errors import DomainError
from weather_api.application.event_handlers import register_event_handlers
from weather_api.dependencies import get_cache_store
from weather_api.services.envelope import ResponseEnvelopeBuilder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    register_event_handlers()
    yield
    store = get_cache_store()
    close = getattr(store, "close", None)
    if close is not None:
        await close()


app = FastAPI(
    title="Weather API",
    description="Cached weather lookups in front of a rate-limited provider",
    version=settings.VERSION,
    lifespan=lifespan,
)


envelopes = ResponseEnvelopeBuilder()


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    envelope = envelopes.error(code, message, details)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


# Domain error handlers
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error_response(400, "validation-error", "Invalid request query", jsonable_errors(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "internal-error", "Internal server error")

# Include routers
app.include_router(health.router, tags=["Health"])  # Health check endpoints first
app.include_router(weather.router, tags=["Weather"])

@app.get("/")
async def root():
    return {"message": "Weather service is running"}
