import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from authdemo.app import create_app
from authdemo.auth.store import CsvUserStore, MemoryUserStore
from authdemo.config import Settings


class FakeClock:
    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture()
def users_csv(tmp_path: Path) -> Path:
    return tmp_path / "data" / "users.csv"


@pytest.fixture()
def settings(users_csv: Path) -> Settings:
    return Settings(
        store_backend="csv",
        users_path=users_csv,
        secret_key="test-secret",
        session_max_age=3600,
    )


@pytest.fixture(params=["memory", "csv"])
def store(request, users_csv):
    """Every store contract test runs against both variants."""
    if request.param == "memory":
        return MemoryUserStore()
    return CsvUserStore(users_csv)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))
