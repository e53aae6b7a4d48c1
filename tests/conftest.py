"""Shared test fixtures."""

import pytest

from app import create_app
from config import db
from loop_guard import InMemorySessionStore, LoopGuard
from models import ErrorDefinition

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "RATELIMIT_ENABLED": False,
    "DEFAULT_SERVICE": "AEPS",
    "SESSION_STORE": "cookie",
    "KB_MATCH_ORDER": "first",
    "ADMIN_USER": "admin",
    "ADMIN_PASS": "secret",
    "LOG_LEVEL": "WARNING",
}


@pytest.fixture
def app_config():
    return dict(TEST_CONFIG)


@pytest.fixture
def app(app_config):
    app = create_app(app_config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def loop_guard():
    return LoopGuard(InMemorySessionStore())


@pytest.fixture
def add_definition(app_ctx):
    """Insert a knowledge base row and return it."""

    def _add(key_text, answer_en, answer_hi=None, service="AEPS"):
        definition = ErrorDefinition(service=service, key_text=key_text, answer_en=answer_en, answer_hi=answer_hi)
        db.session.add(definition)
        db.session.commit()
        return definition

    return _add
