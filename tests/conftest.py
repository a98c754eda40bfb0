import pytest
from fastapi.testclient import TestClient

from blog.dependencies import get_post_store
from core.config import DatabaseSettings, Settings
from fakes import InMemoryPostStore
from main import create_app


def pytest_addoption(parser):
    parser.addoption(
        "--postgresql", action="store_true", default=False, help="Run Postgresql tests"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--postgresql"):
        return

    skip_postgresql = pytest.mark.skip(reason="need --postgresql option to run")
    for item in items:
        if "postgresql" in item.keywords:
            item.add_marker(skip_postgresql)


@pytest.fixture
def store():
    return InMemoryPostStore()


@pytest.fixture
def settings():
    return Settings(database=DatabaseSettings(synchronize=False, log_sql=False))


@pytest.fixture
def app(settings, store):
    # The lifespan (and so the pool) only runs when TestClient is used as a
    # context manager, which these tests never do.
    application = create_app(settings)
    application.dependency_overrides[get_post_store] = lambda: store
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
