# backend/database.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.database_url
STORE_TIMEOUT = settings.STORE_TIMEOUT_SECONDS


# Every store call is bounded by the same timeout; nothing is retried
def engine_options(url: str, timeout: int = STORE_TIMEOUT) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False, "timeout": timeout}}
    if url.startswith("postgresql"):
        return {
            "connect_args": {
                "connect_timeout": timeout,
                "options": f"-c statement_timeout={timeout * 1000}",
            },
            "pool_timeout": timeout,
            "pool_pre_ping": True,
        }
    return {"pool_timeout": timeout}


engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_options(SQLALCHEMY_DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Import models so their tables are registered on Base.metadata
    import models.users  # noqa: F401
    import models.enquiry  # noqa: F401
    import models.log  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database ready (dialect=%s)", engine.dialect.name)
