"""FastAPI application entrypoint. No business logic; only wiring, error rendering, and middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.api.routes import health
from app.api.routes import router as api_router
from app.core.config import Settings, get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.errors import ServiceError
from app.models import Base
from app.services.auth import AuthService
from app.services.seed import seed_sample_sweets
from app.services.sweets import SweetService

logger = logging.getLogger(__name__)


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors to [{param, msg}], param being the offending field name."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        msg = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append({"param": ".".join(loc) or "body", "msg": msg})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as {"error": ...} or, for field validation, {"errors": [...]}."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Service fault on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": _validation_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application with its own engine and service instances.

    Services are created once here and stored on app.state; route dependencies
    read them from there. Tables are created (and sample data seeded, when
    SEED_SAMPLE_DATA is set) on startup.
    """
    settings = settings or get_settings()
    engine = create_db_engine(settings)
    session_factory = create_session_factory(engine)
    sweet_service = SweetService(session_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.uses_default_jwt_secret:
            logger.warning(
                "JWT_SECRET is the built-in default; set JWT_SECRET before deploying (APP_ENV=%s).",
                settings.APP_ENV,
            )
        Base.metadata.create_all(bind=engine)
        if settings.SEED_SAMPLE_DATA:
            try:
                seed_sample_sweets(session_factory, sweet_service)
            except Exception:
                logger.exception("Seeding sample sweets failed; continuing without sample data.")
        yield
        engine.dispose()

    app = FastAPI(
        title="Sweet Shop API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.auth_service = AuthService(session_factory, settings)
    app.state.sweet_service = sweet_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(health.router, prefix="/health", tags=["health"])

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Sweet Shop API"}

    return app


app = create_app()
