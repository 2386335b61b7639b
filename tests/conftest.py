import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, create_engine

from salon.auth import get_current_admin
from salon.db import get_session, init_db
from salon.deps import get_config, get_notifiers
from salon.main import app
from salon.notifications import Notifiers
from tests.helpers import FakeEmail, FakeTelegram, make_config


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'salon-test.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def notifiers():
    return Notifiers(telegram=FakeTelegram(), email=FakeEmail())


@pytest.fixture
def client(engine, config, notifiers):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_notifiers] = lambda: notifiers
    app.dependency_overrides[get_current_admin] = lambda: {"username": "admin", "role": "admin"}
    yield TestClient(app)
    app.dependency_overrides.clear()
