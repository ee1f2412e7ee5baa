"""
Goal-tracking app backend API
Auth (signup/login), user data sync, admin email export, RevenueCat webhooks.
"""
import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

from app.core import config  # loads .env

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True  # Override any existing configuration
)

logger = logging.getLogger(__name__)


def run_migrations() -> None:
    """Run Alembic migrations on startup. Uses alembic.ini and DATABASE_URL.
    Fails startup if migrations fail, so the DB is never left out of sync."""
    if not config.RUN_MIGRATIONS:
        logger.info("RUN_MIGRATIONS disabled, skipping Alembic migrations")
        return
    if config.DATABASE_URL.startswith("sqlite"):
        # Revisions use PostgreSQL DDL; local SQLite relies on create_all
        logger.info("SQLite database, skipping Alembic migrations")
        return
    project_root = Path(__file__).resolve().parent.parent
    alembic_ini = project_root / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("alembic.ini not found, skipping Alembic migrations")
        return
    try:
        alembic_cfg = Config(str(alembic_ini))
        alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
        alembic_cfg.set_main_option("sqlalchemy.url", config.DATABASE_URL)
        command.upgrade(alembic_cfg, "head")
        logger.info("Alembic migrations completed successfully")
    except Exception as e:
        logger.exception("Alembic migration failed: %s", e)
        raise  # Fail startup so DB is not left out of sync


from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.routes import auth, admin, user, webhooks
from app.db.session import engine, SessionLocal
from app.db.base import Base
from app.dependencies.services import build_services
# Import all models to ensure they're registered with Base
from app.models import User, EmailRecord  # noqa: F401

app = FastAPI(title="Ambitionly Backend")


@app.on_event("startup")
async def startup_event():
    """Create tables, run Alembic migrations, then build the app-scoped services."""
    try:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error("Error creating tables: %s", e)
        raise

    run_migrations()

    if not config.supabase_configured():
        logger.warning(
            "[Supabase] SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY missing; "
            "user mirroring and profile loading will be skipped"
        )

    app.state.services = build_services(SessionLocal)
    logger.info("Application startup complete")


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])


@app.get("/health")
def health():
    return {"status": "ok"}
