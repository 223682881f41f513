# pos_api/database.py

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from pos_api.core.config import Settings, settings


def build_engine(config: Settings) -> Engine:
    connect_args = {}

    # SQLite connections are handed across FastAPI's threadpool
    if config.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        config.DATABASE_URL,
        echo=config.DB_ECHO,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(settings)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # closing rolls back anything a failed or abandoned request left open
        db.close()
