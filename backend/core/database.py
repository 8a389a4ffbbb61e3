# backend/core/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import get_settings

settings = get_settings()

DATABASE_URL = settings.database_url


def build_engine(database_url: str, echo: bool = False):
    """Create an engine with pool settings suited to the backend in use."""
    engine_kwargs = {
        "echo": echo,
        "pool_pre_ping": True,
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = settings.db_max_overflow

    return create_engine(database_url, **engine_kwargs)


engine = build_engine(DATABASE_URL, echo=settings.log_sql_queries)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """Dependency returning the factory used for short-lived sessions."""
    return SessionLocal


def init_db(bind=None):
    """Create all tables registered on ``Base``."""
    # Model modules must be imported so their tables are registered
    from modules.businesses.models import business_models  # noqa: F401
    from modules.reviews.models import review_models  # noqa: F401
    from modules.analytics.models import analytics_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
