def test_vehicles_full_crud_flow(client, store, admin_headers):
    create_resp = client.post("/vehicles", json={"licensePlate": " 44-ddd-44 ", "model": "Tesla Model 3"})
    assert create_resp.status_code == 201
    vehicle = create_resp.json()
    vehicle_id = vehicle["id"]
    assert vehicle["licensePlate"] == "44DDD44"
    assert vehicle["status"] == "Available"
    assert set(vehicle) == {"id", "licensePlate", "model", "status", "createdAt"}

    list_resp = client.get("/vehicles")
    assert list_resp.status_code == 200
    ids = [item["id"] for item in list_resp.json()]
    assert vehicle_id in ids

    status_resp = client.patch("/vehicles/44-ddd-44/status", json={"status": "InUse"})
    assert status_resp.status_code == 200
    assert status_resp.json()["status"] == "InUse"

    back_resp = client.patch("/vehicles/44DDD44/status", json={"status": "Available"})
    assert back_resp.status_code == 200

    plate_resp = client.patch(f"/vehicles/{vehicle_id}/plate", json={"licensePlate": "55-eee-55"})
    assert plate_resp.status_code == 200
    assert plate_resp.json()["licensePlate"] == "55EEE55"

    delete_resp = client.delete(f"/vehicles/{vehicle_id}", headers=admin_headers)
    assert delete_resp.status_code == 200
    assert delete_resp.json() == {"deletedId": vehicle_id}

    missing_resp = client.patch(f"/vehicles/{vehicle_id}/plate", json={"licensePlate": "66FFF66"})
    assert missing_resp.status_code == 404
    assert missing_resp.json()["error"]["code"] == "VEHICLE_NOT_FOUND"
    assert store.write_count == 5


def test_create_validation_errors_map_to_400(client):
    resp = client.post("/vehicles", json={})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "LICENSE_PLATE_REQUIRED"

    resp = client.post("/vehicles", json={"licensePlate": "77GGG77"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MODEL_REQUIRED"

    resp = client.post("/vehicles", json={"licensePlate": "a-1", "model": "M"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["code"] == "INVALID_LICENSE_PLATE"
    assert body["error"]["message"]


def test_wrongly_typed_body_is_rejected_by_fastapi(client):
    resp = client.post("/vehicles", json={"licensePlate": ["not", "a", "string"], "model": "M"})
    assert resp.status_code == 422


def test_conflicts_map_to_409(client, store, admin_headers):
    duplicate = client.post("/vehicles", json={"licensePlate": "11-aaa-11", "model": "M"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "DUPLICATE_LICENSE_PLATE"

    illegal = client.patch("/vehicles/33CCC33/status", json={"status": "InUse"})
    assert illegal.status_code == 409
    assert illegal.json()["error"]["code"] == "ILLEGAL_STATUS_TRANSITION"

    capped = client.patch("/vehicles/11AAA11/status", json={"status": "Maintenance"})
    assert capped.status_code == 409
    assert capped.json()["error"]["code"] == "MAINTENANCE_CAP_EXCEEDED"

    plate_taken = client.patch("/vehicles/1/plate", json={"licensePlate": "22-bbb-22"})
    assert plate_taken.status_code == 409
    assert plate_taken.json()["error"]["code"] == "DUPLICATE_LICENSE_PLATE"

    not_deletable = client.delete("/vehicles/2", headers=admin_headers)
    assert not_deletable.status_code == 409
    assert not_deletable.json()["error"]["code"] == "NOT_ALLOWED_STATUS_FOR_DELETE"
    assert store.write_count == 0


def test_invalid_status_and_unknown_plate(client):
    invalid = client.patch("/vehicles/11AAA11/status", json={"status": "Broken"})
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "INVALID_STATUS"

    unknown = client.patch("/vehicles/00XXX00/status", json={"status": "Available"})
    assert unknown.status_code == 404


def test_noop_updates_return_vehicle_without_writing(client, store):
    same_status = client.patch("/vehicles/11-aaa-11/status", json={"status": "Available"})
    assert same_status.status_code == 200
    assert same_status.json()["status"] == "Available"

    same_plate = client.patch("/vehicles/1/plate", json={"licensePlate": "11-aaa-11"})
    assert same_plate.status_code == 200
    assert same_plate.json()["licensePlate"] == "11AAA11"
    assert store.write_count == 0


def test_delete_requires_admin_token(client, store):
    no_token = client.delete("/vehicles/1")
    assert no_token.status_code == 403
    assert no_token.json()["error"]["code"] == "ADMIN_APPROVAL_REQUIRED"

    wrong_token = client.delete("/vehicles/1", headers={"x-admin-token": "nope"})
    assert wrong_token.status_code == 403
    assert store.write_count == 0
    assert len(client.get("/vehicles").json()) == 3


def test_delete_refused_when_admin_token_not_configured(client, monkeypatch, store, admin_headers):
    monkeypatch.delenv("ADMIN_DELETE_TOKEN")
    resp = client.delete("/vehicles/1", headers=admin_headers)
    assert resp.status_code == 403
    assert store.write_count == 0


def test_stats_reports_fleet_summary(client):
    resp = client.get("/stats")
    assert resp.status_code == 200
    assert resp.json() == {
        "total": 3,
        "byStatus": {"Available": 1, "InUse": 1, "Maintenance": 1},
        "maintenanceCap": 1,
        "maintenanceSlotsLeft": 0,
    }
