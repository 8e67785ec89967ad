import json
import logging

import pytest
from fastapi.testclient import TestClient

from fleet_api.app.db import StoreLoadError, VehicleStore, get_data_path
from fleet_api.app.main import app


def test_load_reads_records_in_file_order(data_file):
    store = VehicleStore(data_file).load()
    assert [v["id"] for v in store.vehicles] == ["1", "2", "3"]
    assert store.vehicles[1]["licensePlate"] == "22BBB22"


def test_missing_file_starts_empty_and_persist_creates_it(tmp_path, caplog):
    path = tmp_path / "nested" / "vehicles.json"
    with caplog.at_level(logging.WARNING, logger="fleet_api.app.db"):
        store = VehicleStore(path).load()
    assert store.vehicles == []
    assert "not found" in caplog.text

    store.vehicles.append(
        {"id": "v1", "licensePlate": "ABC123", "model": "M", "status": "Available", "createdAt": "2025-01-01T00:00:00.000Z"}
    )
    store.persist()
    assert json.loads(path.read_text(encoding="utf-8"))[0]["id"] == "v1"


def test_persist_rewrites_whole_document(data_file):
    store = VehicleStore(data_file).load()
    del store.vehicles[0]
    store.persist()
    persisted = json.loads(data_file.read_text(encoding="utf-8"))
    assert [v["id"] for v in persisted] == ["2", "3"]


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"id": "1"}',
        '[{"id": "1", "licensePlate": "11AAA11", "model": "M", "status": "Parked", "createdAt": "x"}]',
        '[{"id": "1"}]',
    ],
)
def test_malformed_documents_fail_loading(tmp_path, content):
    path = tmp_path / "vehicles.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StoreLoadError):
        VehicleStore(path).load()


def test_data_path_comes_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_PATH", str(tmp_path / "fleet.json"))
    assert get_data_path() == (tmp_path / "fleet.json").resolve()

    monkeypatch.delenv("DATA_PATH")
    assert get_data_path().name == "vehicles.json"


def test_startup_loads_store_from_data_path(monkeypatch, data_file):
    monkeypatch.setenv("DATA_PATH", str(data_file))
    with TestClient(app) as client:
        resp = client.get("/vehicles")
    assert resp.status_code == 200
    assert [v["id"] for v in resp.json()] == ["1", "2", "3"]


def test_load_warns_about_plates_the_engine_would_not_write(tmp_path, caplog):
    path = tmp_path / "vehicles.json"
    records = [
        {"id": "1", "licensePlate": "11AAA11", "model": "A", "status": "Available", "createdAt": "2025-01-01T00:00:00.000Z"},
        {"id": "2", "licensePlate": "11-aaa-11", "model": "B", "status": "InUse", "createdAt": "2025-01-02T00:00:00.000Z"},
        {"id": "3", "licensePlate": "33CCC33", "model": "C", "status": "Available", "createdAt": "2025-01-03T00:00:00.000Z"},
    ]
    path.write_text(json.dumps(records), encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="fleet_api.app.db"):
        store = VehicleStore(path).load()

    # records are loaded unchanged
    assert [v["licensePlate"] for v in store.vehicles] == ["11AAA11", "11-aaa-11", "33CCC33"]
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("non-normalized" in m and "'11-aaa-11'" in m for m in messages)
    assert any("1 and 2 share license plate 11AAA11" in m for m in messages)
    assert not any("33CCC33" in m for m in messages)


def test_clean_file_loads_without_warnings(data_file, caplog):
    with caplog.at_level(logging.WARNING, logger="fleet_api.app.db"):
        VehicleStore(data_file).load()
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
