# salon/db.py

import logging

from sqlmodel import SQLModel, Session, create_engine

from .settings import DATABASE_URL

logger = logging.getLogger(__name__)

# SQLite database (file-based) unless DATABASE_URL says otherwise
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=False,          # set to True to see SQL
    connect_args=connect_args,  # required for SQLite + FastAPI
)


def init_db(bind=None):
    from . import models  # noqa: F401 - registers tables

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ready")


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
