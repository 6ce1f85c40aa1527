"""Create all tables without Alembic (local development)."""
from memoryshare.db.session import engine
from memoryshare.db.base import Base
import memoryshare.models  # noqa: F401

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("All tables created successfully!")
