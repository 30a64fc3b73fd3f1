import os

os.environ.setdefault("SCHEDULER_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SCHEDULER_LOG_LEVEL", "DEBUG")

from dataclasses import replace
from datetime import date

import pytest
from sqlalchemy.pool import StaticPool

from scheduler.app import build_application
from scheduler.db import create_db_engine, init_db, make_session_factory
from scheduler.services.task_service import TaskService
from scheduler.services.task_store import TaskStore
from scheduler.settings import get_settings

TODAY = date(2025, 6, 1)


@pytest.fixture
def engine():
    engine = create_db_engine(
        "sqlite:///:memory:", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return TaskStore(make_session_factory(engine))


@pytest.fixture
def service(store):
    return TaskService(store, today=lambda: TODAY)


@pytest.fixture
def client(service, tmp_path):
    (tmp_path / "index.html").write_text("<html>scheduler</html>", encoding="utf-8")
    settings = replace(get_settings(), web_dir=str(tmp_path))
    app = build_application(settings, service=service)
    app.config.update(TESTING=True)
    return app.test_client()
