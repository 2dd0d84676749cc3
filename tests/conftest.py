import pytest
from fastapi.testclient import TestClient

from stockroom import InventoryService, KeyedStore

T0 = 1_700_000_000_000_000_000


class FakeClock:
    """Deterministic nanosecond clock: T0, T0+1000, T0+2000, ..."""

    def __init__(self, start: int = T0, step: int = 1_000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture()
def db_path(tmp_path):
    return str(tmp_path / "inventory.db")


@pytest.fixture()
def store(db_path):
    return KeyedStore(db_path)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def service(store, clock):
    return InventoryService(store, clock=clock)


@pytest.fixture()
def client(db_path, monkeypatch):
    import inventory_service.app as app_module

    monkeypatch.setattr(app_module, "DB_PATH", db_path)
    with TestClient(app_module.app) as c:
        yield c
