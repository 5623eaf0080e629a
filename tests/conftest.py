"""
Общие фикстуры для тестов Classroll
"""

import os
import sys

import pytest

# Добавляем backend в путь
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend"))

from fastapi.testclient import TestClient

from classroll.core.config import Settings
from classroll.core.storage import ClassFileStore
from classroll.main import create_app


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    return ClassFileStore(data_dir)


@pytest.fixture
def app_settings(tmp_path, data_dir):
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "basic.html").write_text("<h1>Classroll</h1>", encoding="utf-8")

    return Settings(
        DATA_DIR=data_dir,
        LEGACY_FILE=tmp_path / "students.json",
        STATIC_DIR=static_dir,
        LOG_DIR=tmp_path / "logs",
    )


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings, configure_logging=False)
    with TestClient(app) as test_client:
        yield test_client
