from factories import login


def test_admin_lists_users_with_request_counts(client, admin, alice, bob, crm):
    alice_h = login(client, "alice")
    for access_type in ("Read", "Write"):
        client.post(
            "/api/requests",
            json={"softwareId": crm.id, "accessType": access_type, "reason": "reports"},
            headers=alice_h,
        )

    response = client.get("/api/admin/users", headers=login(client, "admin", "admin123"))
    assert response.status_code == 200
    rows = {r["username"]: r for r in response.json()}
    assert rows["alice"]["pending"] == 2
    assert rows["alice"]["total"] == 2
    assert rows["bob"]["total"] == 0
    assert rows["admin"]["role"] == "Admin"
    assert "password" not in str(rows).lower()


def test_only_admin_lists_users(client, alice, bob):
    assert client.get("/api/admin/users", headers=login(client, "alice")).status_code == 403
    assert client.get("/api/admin/users", headers=login(client, "bob")).status_code == 403


def test_admin_promotes_user(client, admin, alice):
    alice_h = login(client, "alice")
    assert client.get("/api/requests/pending", headers=alice_h).status_code == 403

    admin_h = login(client, "admin", "admin123")
    response = client.patch(f"/api/admin/users/{alice.id}/role", json={"role": "Manager"}, headers=admin_h)
    assert response.status_code == 200
    assert response.json()["role"] == "Manager"

    # Same token, new role.
    assert client.get("/api/requests/pending", headers=alice_h).status_code == 200


def test_demoted_reviewer_loses_access_immediately(client, admin, alice, bob, crm):
    bob_h = login(client, "bob")
    created = client.post(
        "/api/requests",
        json={"softwareId": crm.id, "accessType": "Read", "reason": "reports"},
        headers=login(client, "alice"),
    ).json()

    admin_h = login(client, "admin", "admin123")
    response = client.patch(f"/api/admin/users/{bob.id}/role", json={"role": "Employee"}, headers=admin_h)
    assert response.status_code == 200

    response = client.patch(f"/api/requests/{created['id']}/status", json={"status": "Approved"}, headers=bob_h)
    assert response.status_code == 403
    assert client.get("/api/requests/pending", headers=bob_h).status_code == 403
    assert client.get(f"/api/requests/{created['id']}", headers=login(client, "alice")).json()["status"] == "Pending"


def test_role_update_errors(client, admin, alice, bob):
    admin_h = login(client, "admin", "admin123")
    assert client.patch(f"/api/admin/users/{admin.id}/role", json={"role": "Employee"}, headers=admin_h).status_code == 400
    assert client.patch(f"/api/admin/users/{alice.id}/role", json={"role": "Owner"}, headers=admin_h).status_code == 400
    assert client.patch("/api/admin/users/999/role", json={"role": "Manager"}, headers=admin_h).status_code == 404
    assert client.patch(
        f"/api/admin/users/{alice.id}/role", json={"role": "Admin"}, headers=login(client, "bob")
    ).status_code == 403
