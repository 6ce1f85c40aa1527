"""
MemoryShare Backend API
Guest photo/video collection for event spaces.
"""
from dotenv import load_dotenv
load_dotenv()

import logging
import os
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

# Configure logging for Render compatibility
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True  # Override any existing configuration
)

logger = logging.getLogger(__name__)

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from memoryshare.api.routes import media, payments, spaces, users
from memoryshare.core.config import get_settings
from memoryshare.db.base import Base
from memoryshare.db.session import engine
from memoryshare.utils.errors import http_exception_handler, validation_exception_handler
# Import all models to ensure they're registered with Base
from memoryshare.models import Space, Media, User, Payment  # noqa: F401


def run_migrations() -> None:
    """Run Alembic migrations on startup. Uses alembic.ini and DATABASE_URL.
    Fails startup if migrations fail, so the DB is never left out of sync."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_ini = project_root / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("alembic.ini not found, skipping Alembic migrations")
        return
    if not os.getenv("DATABASE_URL"):
        logger.error("DATABASE_URL is not set. Alembic migrations will not run.")
        return
    db_url = get_settings().database_url
    try:
        alembic_cfg = Config(str(alembic_ini))
        alembic_cfg.attributes["configure_logger"] = False
        alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
        alembic_cfg.set_main_option("sqlalchemy.url", db_url)
        command.upgrade(alembic_cfg, "head")
        logger.info("Alembic migrations completed successfully")
    except Exception as e:
        logger.exception("Alembic migration failed: %s", e)
        raise  # Fail startup so DB is not left out of sync; fix migration or env and redeploy


app = FastAPI(title="MemoryShare")

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.on_event("startup")
async def startup_event():
    """Create tables, then run Alembic migrations on every server restart."""
    try:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error("Error creating tables: %s", e)
        raise

    run_migrations()

    settings = get_settings()
    missing = settings.missing_cloudinary_keys() + settings.missing_paystack_keys()
    if missing:
        logger.warning("Missing configuration, related routes will return 503: %s", ", ".join(missing))


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
# payments before spaces so /paystack/... never reads as a slug
app.include_router(payments.router, prefix="/api/spaces", tags=["Payments"])
app.include_router(spaces.router, prefix="/api/spaces", tags=["Spaces"])
app.include_router(media.router, prefix="/api/spaces", tags=["Media"])
app.include_router(users.router, prefix="/api/user", tags=["Users"])


@app.get("/health")
async def health():
    return {"status": "ok"}
