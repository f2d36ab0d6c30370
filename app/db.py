import os
from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import get_settings


SQLALCHEMY_DATABASE_URL = get_settings().DATABASE_URL
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=(
        {"check_same_thread": False}
        if SQLALCHEMY_DATABASE_URL.startswith("sqlite")
        else {}
    ),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_database():
    """Create the SQLite data directory if needed, then all tables."""
    # pylint: disable-next=import-outside-toplevel,unused-import
    from app.models import booking, room, user  # noqa: F401

    database = make_url(SQLALCHEMY_DATABASE_URL).database
    directory = os.path.dirname(database) if database else ""
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    Base.metadata.create_all(bind=engine)


def get_db():
    """Provide a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
