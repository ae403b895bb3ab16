# src/database.py
import logging

from sqlalchemy import case, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()
# Models annotate plain Column attributes (``id: int = Column(...)``).
Base.__allow_unmapped__ = True


def init_db(bind=None) -> None:
    """Create all tables if they don't exist."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables initialised")


def adjust_counter(db: Session, column, row_id: int, delta: int) -> None:
    """Atomically shift a denormalized counter column on one row, never below zero."""
    model = column.class_
    if delta >= 0:
        value = column + delta
    else:
        value = case((column + delta > 0, column + delta), else_=0)
    db.query(model).filter(model.id == row_id).update({column: value}, synchronize_session=False)


def get_db():
    """FastAPI dependency that yields a DB session."""
    db: Session = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
