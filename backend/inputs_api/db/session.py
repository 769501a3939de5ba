from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from inputs_api.core import config
from inputs_api.db.base import Base

# SQLite connections are handed across FastAPI's worker threads
connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(config.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    # Import for the side effect of registering every model on Base.metadata
    from inputs_api.db import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
