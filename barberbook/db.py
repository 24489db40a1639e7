# barberbook/db.py

import logging

from sqlmodel import SQLModel, create_engine, Session

from barberbook.config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # required for SQLite + FastAPI

engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    connect_args=connect_args,
)


def init_db(bind=None):
    # registers the tables on SQLModel.metadata
    from barberbook import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ensured")


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
