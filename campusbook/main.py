import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from .auth import seed_admin
from .config import get_settings
from .database import Base, SessionLocal, engine, ensure_supported_backend
from .exceptions import register_exception_handlers
from .logging_middleware import add_audit_middleware, configure_app_logging
from .notifier import connection_manager, notifier
from .rate_limit import apply_rate_limiter
from .routers import auth, bookings, events, halls, meta, users

settings = get_settings()
logger = configure_app_logging("campusbook")


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_supported_backend(settings.database_url)
    if settings.run_db_migrations:
        Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_admin(db)
    notifier.bind_loop(asyncio.get_running_loop())
    unsubscribe = notifier.subscribe(connection_manager.broadcast)
    logger.info("CampusBook started")
    yield
    unsubscribe()
    notifier.bind_loop(None)


def create_app() -> FastAPI:
    fastapi_app = FastAPI(title="CampusBook", version="1.0.0", lifespan=lifespan)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_rate_limiter(fastapi_app)
    add_audit_middleware(fastapi_app, "campusbook")
    register_exception_handlers(fastapi_app)
    Instrumentator().instrument(fastapi_app).expose(fastapi_app)

    fastapi_app.include_router(auth.router)
    fastapi_app.include_router(users.router)
    fastapi_app.include_router(halls.router)
    fastapi_app.include_router(bookings.router)
    fastapi_app.include_router(events.router)
    fastapi_app.include_router(meta.router)
    return fastapi_app


app = create_app()

