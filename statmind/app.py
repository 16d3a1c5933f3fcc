"""Main FastAPI application."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, ORJSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from statmind import __version__
from statmind.config import settings
from statmind.errors import InvalidThresholds, InvalidWeights
from statmind.app_logging import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from statmind.deps import get_engine, get_live_service

    logger.info(f"Starting StatMind Prediction API - Environment: {settings.ENVIRONMENT}")
    # Fail fast on bad weights/thresholds
    get_engine()

    live = get_live_service()
    if settings.LIVE_POLLING_ENABLED:
        live.start_watching()
        await live.watch()
    yield
    live.stop_watching()
    live.scheduler.stop()
    logger.info("Shutting down StatMind Prediction API")


app = FastAPI(
    title="StatMind Prediction API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"message": exc.detail, "type": "http_error"}},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "message": "Validation error",
                "type": "validation_error",
                "details": exc.errors(),
            }
        },
    )


@app.exception_handler(InvalidWeights)
@app.exception_handler(InvalidThresholds)
async def configuration_exception_handler(request: Request, exc: Exception):
    logger.warning(f"Rejected configuration on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": {"message": str(exc), "type": "configuration_error"}},
    )


# Import and register routes
from statmind.routes import health, predictions, live  # noqa: E402

app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(predictions.router, prefix="/api/predictions", tags=["predictions"])
app.include_router(live.router, prefix="/api/live", tags=["live"])
logger.info("Routers registered: /api, /api/predictions, /api/live")


@app.get("/")
async def root():
    return {"message": "StatMind Prediction API", "documentation": "/docs"}
