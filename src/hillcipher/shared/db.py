import logging
from collections.abc import Iterator

from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from hillcipher.models.schema import *  # noqa: F403 # SQLModel subclasses need to be in memory
from hillcipher.shared import Logger, load_config

__all__ = ["engine", "get_session", "make_engine"]

logger = Logger(__name__, level=logging.DEBUG).get_logger()

config = load_config()


def make_engine(database_path: str) -> Engine:
    kwargs = {}
    if database_path.startswith("sqlite"):
        # FastAPI serves requests from worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_path in ("sqlite://", "sqlite:///:memory:"):
            # A single shared connection, otherwise each thread gets its own empty database
            kwargs["poolclass"] = StaticPool

    new_engine = create_engine(database_path, **kwargs)
    SQLModel.metadata.create_all(new_engine)
    logger.debug("Database ready at %s", database_path)
    return new_engine


engine: Engine = make_engine(config.database.path)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
