import os
import sys
from pathlib import Path
from typing import Generator

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_OVERRIDES = {
    "SECRET_KEY": "test-secret",
    "JWT_SECRET_KEY": "test-jwt-secret",
    "FLASK_DEBUG": "false",
    "FLASK_TESTING": "true",
    "SECURITY_ENFORCE_STRONG_SECRETS": "false",
}


@pytest.fixture(autouse=True)
def isolate_test_env() -> Generator[None, None, None]:
    tracked_keys = set(TEST_ENV_OVERRIDES.keys())
    original_values = {key: os.environ.get(key) for key in tracked_keys}
    yield
    for key, value in original_values.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def app(tmp_path: Path):
    test_db_path = tmp_path / "test.sqlite3"
    for key, value in TEST_ENV_OVERRIDES.items():
        os.environ[key] = value

    from finance_tracker import create_app
    from finance_tracker.extensions.database import db

    app = create_app(
        {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{test_db_path}",
            "TESTING": True,
            # HTTP tests evaluate achievements explicitly.
            "ACHIEVEMENT_TRIGGER_ENABLED": False,
        }
    )

    with app.app_context():
        db.drop_all()
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
    if test_db_path.exists():
        test_db_path.unlink()


@pytest.fixture
def client(app) -> Generator:
    yield app.test_client()


@pytest.fixture
def app_context(app) -> Generator:
    with app.app_context():
        yield app


@pytest.fixture
def make_user(app_context):
    from finance_tracker.extensions.database import db
    from finance_tracker.models.user import User

    counter = {"value": 0}

    def _make_user(name: str | None = None) -> User:
        counter["value"] += 1
        suffix = counter["value"]
        user = User(
            name=name or f"user-{suffix}",
            email=f"user-{suffix}@email.com",
            password="not-a-real-hash",
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("Jane Doe")
