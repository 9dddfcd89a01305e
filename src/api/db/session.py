from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from api.config import settings

DATABASE_URL = settings.DATABASE_URL
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL must be set in the environment")


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options = {"connect_args": {"check_same_thread": False}}
    # An in-memory database only lives as long as its single connection.
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))


def init_db():
    """Initialize database schema in local/dev when explicitly enabled.

    Prefer running Alembic migrations in non-dev environments. To enable
    automatic table creation for local development, set DB_AUTO_CREATE=1.
    """
    if settings.DB_AUTO_CREATE:
        # Table classes register themselves on SQLModel.metadata at import.
        import api.db.models  # noqa: F401

        SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
