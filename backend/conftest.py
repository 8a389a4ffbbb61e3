"""
Pytest configuration file for backend testing.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from core.config import Settings  # noqa: E402
from core.database import build_engine, init_db  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite database so each session gets its own connection."""
    test_engine = build_engine(f"sqlite:///{tmp_path / 'test_reviews.db'}")
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Create a test database session."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with short retry delays."""
    return Settings(
        public_base_url="https://reviews.example.com",
        aggregate_max_retries=5,
        aggregate_retry_initial_delay=0.001,
        aggregate_retry_max_delay=0.01,
    )


@pytest.fixture
def updater(session_factory, test_settings):
    """Aggregate updater bound to the test database."""
    from modules.analytics.services.aggregate_updater import AggregateUpdater

    return AggregateUpdater(session_factory, test_settings)


@pytest.fixture
def read_aggregate(session_factory):
    """Read an aggregate from a fresh session, bypassing any cached state."""
    from modules.analytics.services.aggregate_repository import DailyAggregateRepository

    def _read(business_id, day):
        with session_factory() as db:
            aggregate = DailyAggregateRepository(db).get_aggregate(business_id, day)
            if aggregate is not None:
                db.expunge(aggregate)
            return aggregate

    return _read


@pytest.fixture(autouse=True)
def bind_factories(request):
    """Point the factory_boy factories at the current test session."""
    if "db_session" not in request.fixturenames:
        yield
        return

    from tests.factories import bind_session

    bind_session(request.getfixturevalue("db_session"))
    yield
    bind_session(None)


@pytest.fixture
def client(session_factory):
    """TestClient wired to the test database."""
    from fastapi.testclient import TestClient

    from app.main import app
    from core.database import get_db, get_session_factory

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    # Not used as a context manager: startup would touch the configured database
    yield TestClient(app)

    app.dependency_overrides.clear()
