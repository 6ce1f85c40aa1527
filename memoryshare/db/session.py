from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from memoryshare.core.config import get_settings

SQLALCHEMY_DATABASE_URL = get_settings().database_url


def build_engine(url: str):
    if url.startswith("sqlite"):
        # Local runs and tests; SQLite has no server-side pool to size.
        return create_engine(url, connect_args={"check_same_thread": False})
    # Configure connection pooling to prevent connection exhaustion
    # when many guests upload to the same event at once
    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=10,  # Number of connections to maintain persistently
        max_overflow=20,  # Maximum number of connections to create beyond pool_size
        pool_timeout=30,  # Seconds to wait before giving up on getting a connection
        pool_pre_ping=True,  # Verify connections before using them (handles stale connections)
        pool_recycle=3600,  # Recycle connections after 1 hour to prevent stale connections
        echo=False  # Set to True for SQL query logging (useful for debugging)
    )


engine = build_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
