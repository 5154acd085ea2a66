"""Pytest configuration and fixtures."""

import os
import pytest
from fastapi.testclient import TestClient

# Keep the module-level app in app.py away from any real database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from app import create_app
from config import Settings
from db import ApplicationStore


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'btr_test.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(database_url=database_url, cors_origins=["*"])


@pytest.fixture
def store(database_url):
    """Connected store on a fresh SQLite file."""
    s = ApplicationStore(database_url)
    s.connect()
    yield s
    s.close()


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def application_body():
    return {
        "tcNo": "12345678901",
        "fullName": "Ayşe Yılmaz",
        "branch": "Bilişim Teknolojileri",
        "email": "ayse@example.com",
        "phone": "05551234567",
        "weeklyHours": 15,
        "certificateDate": "2024-06-01",
        "normStatus": "Norm içi",
        "preferences": {"ilTercihi": "Bursa", "ilceTercihi": "Nilüfer"},
        "specialRequest": "",
        "teacherDate": "2015-09-01",
    }
