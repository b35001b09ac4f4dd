from __future__ import annotations

import pytest

from loto_game import create_app
from loto_game.db import new_session


VALID_ROWS = [
    [5, None, 23, None, 45, None, 67, None, 82],
    [None, 12, None, 34, None, 56, None, 78, 85],
    [8, None, 29, None, 49, None, 69, None, 88],
]


@pytest.fixture()
def valid_grid():
    return tuple(tuple(row) for row in VALID_ROWS)


@pytest.fixture()
def other_grid():
    rows = [list(row) for row in VALID_ROWS]
    rows[0][0] = 6
    return tuple(tuple(row) for row in rows)


@pytest.fixture()
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "DATABASE_URL": f"sqlite:///{tmp_path / 'loto-test.db'}",
            "LOG_LEVEL": "DEBUG",
        }
    )
    yield app
    app.extensions["engine"].dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def session(app):
    with app.app_context():
        s = new_session()
        try:
            yield s
        finally:
            s.rollback()
            s.close()
