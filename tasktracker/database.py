import logging
import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from tasktracker.config import settings
from tasktracker.errors import StoreFailure, TrackerError

logger = logging.getLogger(__name__)

# Default to a local SQLite database if no DATABASE_URL is provided or usable
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(BASE_DIR, ".."))
DEFAULT_DB_PATH = os.path.join(PROJECT_ROOT, "tasktracker.db")


def _build_engine():
    """Create the SQLAlchemy engine, preferring the configured DATABASE_URL."""
    database_url = settings.DATABASE_URL

    if database_url:
        try:
            engine = create_engine(database_url)
            # Ensure the target database is reachable; otherwise fall back to SQLite
            with engine.connect():
                pass
            return engine
        except ModuleNotFoundError as exc:
            logger.warning("Database driver missing for %s (%s); using SQLite", database_url, exc)
        except SQLAlchemyError as exc:
            logger.warning("Database %s unreachable (%s); using SQLite", database_url, exc)

    sqlite_url = f"sqlite:///{DEFAULT_DB_PATH}"
    return create_engine(sqlite_url, connect_args={"check_same_thread": False})


engine = _build_engine()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for the ORM models
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_write(db: Session, action: str):
    """Run the statements issued inside the block as one transaction.

    Commits when the block completes; any ``SQLAlchemyError`` rolls the whole
    transaction back and is re-raised as ``StoreFailure``. A ``TrackerError``
    raised from the block also rolls back, then propagates unchanged.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure while trying to %s", action)
        raise StoreFailure(f"Failed to {action}: {exc}") from exc
    except TrackerError:
        db.rollback()
        raise
