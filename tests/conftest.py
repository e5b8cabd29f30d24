from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from carematch.config import AppConfig
from carematch.context import AppContext
from carematch.main import create_app


@pytest.fixture
def context(tmp_path):
    ctx = AppContext.open(
        AppConfig(),
        database_path=tmp_path / "carematch.db",
        image_dir=tmp_path / "images",
    )
    yield ctx
    ctx.close()


@pytest.fixture
def client(context) -> TestClient:
    return TestClient(create_app(context))
