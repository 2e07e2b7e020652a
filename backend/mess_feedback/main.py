import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from mess_feedback.config import Settings, get_settings
from mess_feedback.database import build_engine, build_session_factory, create_tables
from mess_feedback.exceptions import MessFeedbackError, StorageError
from mess_feedback.routers import auth as auth_router
from mess_feedback.routers import feedback, meals
from mess_feedback.services.credential_service import CredentialService

logger = logging.getLogger(__name__)


async def seed_admin(app: FastAPI) -> None:
    """Create the configured admin account if it doesn't exist. Idempotent."""
    settings: Settings = app.state.settings
    if not (settings.admin_email and settings.admin_password):
        return
    created = await app.state.credential_service.ensure_admin(
        settings.admin_email, settings.admin_password, settings.admin_name
    )
    if created:
        logger.info("Created admin account %s", settings.admin_email)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables then seed the admin account
    await create_tables(app.state.engine)
    await seed_admin(app)
    yield
    # Shutdown
    await app.state.engine.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MessFeedbackError)
    async def handle_domain_error(request: Request, exc: MessFeedbackError):
        body = {"error": exc.message}
        if exc.details:
            body["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Missing or malformed fields",
                "details": [
                    {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(StorageError)
    async def handle_wrapped_storage_error(request: Request, exc: StorageError):
        return storage_error_response(exc.raw)

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: SQLAlchemyError):
        logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
        return storage_error_response(str(exc))


def storage_error_response(raw: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": "Storage error", "message": raw})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.jwt_secret_key == "default_secret_key":
        logger.warning("JWT_SECRET_KEY is not set; using the insecure default")

    app = FastAPI(
        title="Hostel Mess Feedback",
        description="Meal calendar and per-meal student feedback",
        version="1.0.0",
        lifespan=lifespan,
    )

    engine = build_engine(settings.database_url, echo=settings.database_echo)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.credential_service = CredentialService(app.state.session_factory, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.client_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(meals.router, prefix="/api/meals", tags=["Meals"])
    app.include_router(feedback.router, prefix="/api/feedback", tags=["Feedback"])

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "service": "mess-feedback"}

    @app.get("/api/health/db")
    async def database_check(request: Request):
        async with request.app.state.session_factory() as session:
            now = await session.scalar(text("SELECT CURRENT_TIMESTAMP"))
        return {
            "status": "success",
            "message": "Database connection successful",
            "timestamp": str(now),
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()
