from factories import login


def test_any_user_can_browse_software(client, alice, crm):
    headers = login(client, "alice")

    listing = client.get("/api/software", headers=headers)
    assert listing.status_code == 200
    assert listing.json() == [
        {
            "id": crm.id,
            "name": "CRM",
            "description": "Customer relationship management",
            "accessLevels": ["Read", "Write"],
            "createdAt": listing.json()[0]["createdAt"],
        }
    ]

    single = client.get(f"/api/software/{crm.id}", headers=headers)
    assert single.status_code == 200
    assert single.json()["name"] == "CRM"

    assert client.get("/api/software/999", headers=headers).status_code == 404
    assert client.get("/api/software").status_code == 401


def test_admin_creates_software(client, admin):
    headers = login(client, "admin", "admin123")
    response = client.post(
        "/api/software",
        json={"name": "Jira", "description": "Issue tracker", "accessLevels": ["Read", "Write", "Admin"]},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["accessLevels"] == ["Read", "Write", "Admin"]

    dup = client.post(
        "/api/software",
        json={"name": "Jira", "description": "again", "accessLevels": ["Read"]},
        headers=headers,
    )
    assert dup.status_code == 409


def test_software_validation(client, admin):
    headers = login(client, "admin", "admin123")
    bad_level = client.post(
        "/api/software",
        json={"name": "Jira", "description": "Issue tracker", "accessLevels": ["Execute"]},
        headers=headers,
    )
    assert bad_level.status_code == 400

    empty = client.post(
        "/api/software",
        json={"name": "Jira", "description": "Issue tracker", "accessLevels": []},
        headers=headers,
    )
    assert empty.status_code == 400

    missing = client.post("/api/software", json={"name": "Jira"}, headers=headers)
    assert missing.status_code == 400


def test_non_admins_cannot_manage_software(client, alice, bob, crm):
    for headers in (login(client, "alice"), login(client, "bob")):
        assert client.post(
            "/api/software",
            json={"name": "Jira", "description": "x", "accessLevels": ["Read"]},
            headers=headers,
        ).status_code == 403
        assert client.put(f"/api/software/{crm.id}", json={"name": "CRM2"}, headers=headers).status_code == 403
        assert client.delete(f"/api/software/{crm.id}", headers=headers).status_code == 403


def test_admin_updates_software(client, admin, crm):
    headers = login(client, "admin", "admin123")
    response = client.put(
        f"/api/software/{crm.id}",
        json={"description": "Sales CRM", "accessLevels": ["Read", "Write", "Admin"]},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "CRM"
    assert body["description"] == "Sales CRM"
    assert body["accessLevels"] == ["Read", "Write", "Admin"]

    assert client.put("/api/software/999", json={"name": "X"}, headers=headers).status_code == 404


def test_delete_policy(client, admin, alice, crm):
    admin_h = login(client, "admin", "admin123")
    client.post(
        "/api/requests",
        json={"softwareId": crm.id, "accessType": "Read", "reason": "reports"},
        headers=login(client, "alice"),
    )
    blocked = client.delete(f"/api/software/{crm.id}", headers=admin_h)
    assert blocked.status_code == 409

    unused = client.post(
        "/api/software",
        json={"name": "Wiki", "description": "Docs", "accessLevels": ["Read"]},
        headers=admin_h,
    ).json()
    assert client.delete(f"/api/software/{unused['id']}", headers=admin_h).json() == {"ok": True}
    assert client.get(f"/api/software/{unused['id']}", headers=admin_h).status_code == 404
    assert client.delete(f"/api/software/{unused['id']}", headers=admin_h).status_code == 404
