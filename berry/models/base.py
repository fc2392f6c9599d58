"""
Database engine, session management, and base model.

Every model inherits from Base. The ledger service opens its
own units of work from SessionLocal; get_db() hands a plain
session to endpoints that only read (the health check).
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from berry.config import get_settings

settings = get_settings()

# --- Engine ---
# pool_pre_ping=True tests connections before using them, so a
# restarted database or a stale connection does not fail a
# posting halfway through.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# --- Session Factory ---
# autoflush=False: SQL is only sent on explicit flush or commit.
# expire_on_commit=False: value objects are built from rows after
# the unit of work has committed.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
