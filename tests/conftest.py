import json

import pytest
from fastapi.testclient import TestClient

from fleet_api.app.db import VehicleStore
from fleet_api.app.main import app
from fleet_api.app.services.vehicles import VehicleService, get_vehicle_service

ADMIN_TOKEN = "test-admin-token"

BASE_VEHICLES = [
    {"id": "1", "licensePlate": "11AAA11", "model": "Model-A", "status": "Available", "createdAt": "2025-01-01T00:00:00.000Z"},
    {"id": "2", "licensePlate": "22BBB22", "model": "Model-B", "status": "InUse", "createdAt": "2025-01-02T00:00:00.000Z"},
    {"id": "3", "licensePlate": "33CCC33", "model": "Model-C", "status": "Maintenance", "createdAt": "2025-01-03T00:00:00.000Z"},
]


class CountingStore(VehicleStore):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.write_count = 0

    def persist(self) -> None:
        self.write_count += 1
        super().persist()


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "vehicles.json"
    path.write_text(json.dumps(BASE_VEHICLES, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def seed(tmp_path):
    """Write the given records to a fresh data file and return a loaded counting store."""

    def _seed(records):
        path = tmp_path / "seeded.json"
        path.write_text(json.dumps(records), encoding="utf-8")
        return CountingStore(path).load()

    return _seed


@pytest.fixture
def store(data_file):
    return CountingStore(data_file).load()


@pytest.fixture
def service(store):
    return VehicleService(store)


@pytest.fixture
def client(service, monkeypatch):
    monkeypatch.setenv("ADMIN_DELETE_TOKEN", ADMIN_TOKEN)
    app.dependency_overrides[get_vehicle_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"x-admin-token": ADMIN_TOKEN}
