import io

import pytest


def test_login_and_me(client, login):
    login("worker")
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["role"] == "worker"
    assert "request_materials" in body["permissions"]


def test_bad_login(client):
    resp = client.post("/auth/login", json={"email": "worker@josm.com", "password": "nope"})
    assert resp.status_code == 401


def test_anonymous_gets_401(client):
    assert client.get("/materials").status_code == 401
    assert client.get("/auth/me").status_code == 401


@pytest.mark.parametrize("role, method, url", [
    ("worker", "post", "/materials"),
    ("worker", "get", "/boards"),
    ("sales_warehouse", "get", "/materials"),
    ("supervisor", "get", "/users"),
    ("store_keeper", "get", "/customer-goods"),
])
def test_role_without_permission_gets_403(login, role, method, url):
    client = login(role)
    resp = getattr(client, method)(url, json={})
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"


def test_job_card_end_to_end(login):
    client = login("supervisor")
    resp = client.post("/jobs", json={
        "job_name": "DB-12", "client_name": "Acme Mall",
        "board_type": "Mini-Flush", "board_color": "Red",
    })
    assert resp.status_code == 201
    job = resp.get_json()
    assert job["job_card_number"] == "JC-0001"
    assert job["status"] == "fabrication"

    url = f"/jobs/{job['id']}/stages"
    for stage in ("fabrication", "assembling"):
        for status in ("In Progress", "Completed"):
            resp = client.post(f"{url}/{stage}", json={"status": status})
            assert resp.status_code == 200, resp.get_json()

    body = resp.get_json()
    assert body["job"]["status"] == "completed"
    assert "Finished Boards" in body["message"]

    client.post("/auth/logout")
    client = login("sales_warehouse")
    boards = client.get("/boards").get_json()
    assert len(boards) == 1
    assert boards[0]["type"] == "Mini-Flush"
    assert boards[0]["color"] == "Red"
    assert boards[0]["quantity"] == 1
    assert boards[0]["min_threshold"] == 2

    txs = client.get(f"/boards/{boards[0]['id']}/transactions").get_json()
    assert [(t["type"], t["quantity"]) for t in txs] == [("manufactured", 1)]


def test_illegal_stage_move_returns_409(login):
    client = login("supervisor")
    job = client.post("/jobs", json={"job_name": "DB-12", "client_name": "Acme"}).get_json()

    resp = client.post(f"/jobs/{job['id']}/stages/assembling", json={"status": "In Progress"})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "illegal_transition"

    resp = client.post(f"/jobs/{job['id']}/stages/painting", json={"status": "In Progress"})
    assert resp.status_code == 400

    resp = client.post("/jobs/999/stages/fabrication", json={"status": "In Progress"})
    assert resp.status_code == 404


def test_missing_field_returns_400(login):
    client = login("supervisor")
    resp = client.post("/jobs", json={"job_name": "DB-12"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_missing_field"
    assert body["field"] == "client_name"


def test_material_request_flow(client, login):
    login("store_keeper")
    mat = client.post("/materials", json={
        "category": "Breakers", "name": "16A MCB", "quantity": 10, "min_threshold": 5,
    }).get_json()
    client.post("/auth/logout")

    login("worker")
    big = client.post("/material-requests", json={
        "material_id": mat["id"], "quantity": 12, "job_card_number": "JC-0001",
    }).get_json()
    small = client.post("/material-requests", json={
        "material_id": mat["id"], "quantity": 4, "job_card_number": "JC-0001",
    }).get_json()
    assert client.post(f"/material-requests/{small['id']}/approve").status_code == 403
    client.post("/auth/logout")

    login("store_keeper")
    resp = client.post(f"/material-requests/{big['id']}/approve")
    assert resp.status_code == 409
    body = resp.get_json()
    assert body["error"] == "insufficient_stock"
    assert body["available"] == 10
    assert client.get(f"/material-requests/{big['id']}").get_json()["status"] == "pending"

    resp = client.post(f"/material-requests/{small['id']}/approve")
    assert resp.status_code == 200
    assert resp.get_json()["request"]["status"] == "approved"
    assert client.get(f"/materials/{mat['id']}").get_json()["quantity"] == 6


def test_worker_sees_only_own_requests(client, login):
    login("store_keeper")
    mat = client.post("/materials", json={"category": "Cables", "name": "Flex", "quantity": 50}).get_json()
    client.post("/auth/logout")

    login("supervisor")
    client.post("/material-requests", json={"material_id": mat["id"], "quantity": 1, "job_card_number": "JC-0001"})
    client.post("/auth/logout")

    login("worker")
    client.post("/material-requests", json={"material_id": mat["id"], "quantity": 2, "job_card_number": "JC-0002"})
    mine = client.get("/material-requests").get_json()
    assert [r["job_card_number"] for r in mine] == ["JC-0002"]


def test_photo_upload_and_download(client, login):
    login("supervisor")
    job = client.post("/jobs", json={"job_name": "DB-12", "client_name": "Acme"}).get_json()

    resp = client.post(
        f"/jobs/{job['id']}/photos",
        data={"photos": [(io.BytesIO(b"jpegdata"), "front.jpg"), (io.BytesIO(b"more"), "side.jpg")]},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    urls = resp.get_json()["photo_urls"]
    assert len(urls) == 2

    got = client.get(urls[0])
    assert got.status_code == 200
    assert got.data in (b"jpegdata", b"more")
    got.close()


def test_admin_manages_users(login):
    client = login("admin")
    resp = client.post("/users", json={
        "name": "New Worker", "email": "New@Josm.com", "password": "pw", "role": "worker",
    })
    assert resp.status_code == 201
    new = resp.get_json()
    assert new["email"] == "new@josm.com"

    assert client.post("/users", json={
        "name": "Dup", "email": "new@josm.com", "password": "pw",
    }).status_code == 409
    assert client.post("/users", json={
        "name": "Bad", "email": "bad@josm.com", "password": "pw", "role": "boss",
    }).status_code == 400

    assert client.post(f"/users/{new['id']}/deactivate").get_json()["active"] is False
    client.post("/auth/logout")

    resp = client.post("/auth/login", json={"email": "new@josm.com", "password": "pw"})
    assert resp.status_code == 401


def test_reports(login):
    client = login("store_keeper")
    client.post("/materials", json={"category": "Breakers", "name": "MCB", "quantity": 1, "min_threshold": 5})
    client.post("/jobs", json={"job_name": "DB-12", "client_name": "Acme"})

    summary = client.get("/reports/summary").get_json()
    assert summary["materials"] == {"total": 1, "low_stock": 1}
    assert summary["jobs"] == {"fabrication": 1, "assembling": 0, "completed": 0}

    low = client.get("/reports/low-stock").get_json()
    assert [m["name"] for m in low["materials"]] == ["MCB"]

    txs = client.get("/reports/transactions/materials?start=2000-01-01").get_json()
    assert len(txs) == 1
    assert client.get("/reports/transactions/materials?end=2000-01-01").get_json() == []
    assert client.get("/reports/transactions/nope").status_code == 400
    assert client.get("/reports/transactions/tools?start=yesterday").status_code == 400


def test_non_object_material_entries_return_400(login):
    client = login("supervisor")
    job = client.post("/jobs", json={"job_name": "DB-12", "client_name": "Acme"}).get_json()

    resp = client.post(f"/jobs/{job['id']}/materials", json=["abc"])
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"

    resp = client.post(f"/jobs/{job['id']}/materials", json={"materials": [1, 2]})
    assert resp.status_code == 400


@pytest.mark.parametrize("role", ["store_keeper", "supervisor", "worker", "sales_warehouse"])
def test_only_admin_manages_users(login, role):
    client = login(role)
    assert client.get("/users").status_code == 403
    assert client.post("/users", json={"name": "X", "email": "x@josm.com", "password": "pw"}).status_code == 403
