"""FastAPI application: main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from app.config import get_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.infrastructure.database import Base, SessionLocal, engine

# Import all models so SQLAlchemy knows about them
from app.domain.models.user import ROLE_ADMIN, User  # noqa: F401
from app.domain.models.category import Category  # noqa: F401
from app.domain.models.product import Product  # noqa: F401
from app.domain.models.cart import Cart, CartItem  # noqa: F401
from app.domain.models.order import Order, OrderItem  # noqa: F401
from app.domain.models.used_token import UsedToken  # noqa: F401

# Import routers
from app.interfaces.api.admin import router as admin_router
from app.interfaces.api.auth import router as auth_router
from app.interfaces.api.cart import router as cart_router
from app.interfaces.api.category import router as category_router
from app.interfaces.api.orders import router as orders_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


def seed_default_admin() -> None:
    """Create the configured admin account when it does not exist yet."""
    if not settings.DEFAULT_ADMIN_EMAIL:
        return

    from app.application.services.auth_service import create_user
    from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    db = SessionLocal()
    try:
        repo = SQLAlchemyUserRepository(db, User)
        if repo.get_by_email(settings.DEFAULT_ADMIN_EMAIL):
            return
        create_user(
            repo,
            full_name="Administrator",
            user_name=settings.DEFAULT_ADMIN_USERNAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password=settings.DEFAULT_ADMIN_PASSWORD,
            phone=settings.DEFAULT_ADMIN_PHONE,
            kyc_card="-",
            role=ROLE_ADMIN,
        )
        logger.info("Default admin user created", email=settings.DEFAULT_ADMIN_EMAIL)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting storefront backend", env=settings.ENVIRONMENT)

    # Create DB tables (production schemas are migrated externally)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    seed_default_admin()

    if settings.SCHEDULER_ENABLED:
        from app.scheduler.jobs import start_scheduler
        start_scheduler()

    yield

    if settings.SCHEDULER_ENABLED:
        from app.scheduler.jobs import stop_scheduler
        stop_scheduler()
    logger.info("Storefront backend stopped")


app = FastAPI(
    title="Storefront API",
    description="Storefront and admin console backend: catalog, cart, orders and JWT sessions",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(category_router)
app.include_router(admin_router)
app.include_router(cart_router)
app.include_router(orders_router)


@app.get("/")
def root():
    return {
        "name": "Storefront API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
