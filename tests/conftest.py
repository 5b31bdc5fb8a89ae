from __future__ import annotations

from pathlib import Path

import pytest

from api import create_app
from models import DBStorage


@pytest.fixture()
def app(tmp_path: Path):
    app = create_app("testing", DATABASE_URL=f"sqlite:///{tmp_path / 'chirpy.db'}")
    yield app
    app.extensions["storage"].dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def storage(tmp_path: Path):
    s = DBStorage(f"sqlite:///{tmp_path / 'store.db'}")
    s.reload()
    yield s
    s.close()
    s.dispose()
