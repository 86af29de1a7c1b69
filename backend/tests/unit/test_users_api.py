from __future__ import annotations

from hrdesk.core.dependencies import get_current_user
from hrdesk.main import app
from tests.conftest import read_document

ALICE = {
    "loginId": "ABC2024001",
    "email": "a@x.com",
    "name": "Alice Baker",
    "password": "Secret1",
    "companyName": "Acme Corp",
}
BOB = {**ALICE, "loginId": "ABC2024002", "email": "b@x.com", "name": "Bob Stone"}


def _seed(client):
    for body in (ALICE, BOB):
        assert client.post("/api/v1/auth/signup", json=body).status_code == 201


def test_users_require_authentication(client):
    assert client.get("/api/v1/users").status_code == 401


def test_list_users_without_passwords(authenticated_client):
    _seed(authenticated_client)

    response = authenticated_client.get("/api/v1/users")

    assert response.status_code == 200
    users = response.json()
    assert [u["loginId"] for u in users] == ["ABC2024001", "ABC2024002"]
    assert all("password" not in u for u in users)


def test_query_parameters_switch_to_lookup(authenticated_client):
    _seed(authenticated_client)

    by_email = authenticated_client.get("/api/v1/users", params={"email": "b@x.com"})
    by_login_id = authenticated_client.get("/api/v1/users", params={"loginId": "ABC2024001"})

    assert by_email.status_code == 200
    assert by_email.json()["loginId"] == "ABC2024002"
    assert by_login_id.json()["email"] == "a@x.com"
    assert "password" not in by_email.json()


def test_lookup_unknown_user_returns_404(authenticated_client):
    response = authenticated_client.get("/api/v1/users", params={"email": "nobody@x.com"})
    assert response.status_code == 404


def test_get_user_by_login_id(authenticated_client):
    _seed(authenticated_client)

    response = authenticated_client.get("/api/v1/users/ABC2024002")

    assert response.status_code == 200
    assert response.json()["name"] == "Bob Stone"
    assert authenticated_client.get("/api/v1/users/NOPE").status_code == 404


def test_update_user(authenticated_client, data_file):
    _seed(authenticated_client)

    response = authenticated_client.put("/api/v1/users/ABC2024001", json={"phone": "+1 555 0100"})

    assert response.status_code == 200
    assert response.json()["phone"] == "+1 555 0100"
    assert response.json()["name"] == "Alice Baker"
    stored = read_document(data_file)["users"][0]
    assert stored["phone"] == "+1 555 0100"
    assert stored["email"] == "a@x.com"


def test_update_user_password_allows_new_login(authenticated_client):
    _seed(authenticated_client)

    authenticated_client.put("/api/v1/users/ABC2024001", json={"password": "Changed9"})
    response = authenticated_client.post(
        "/api/v1/auth/login",
        json={"identifier": "ABC2024001", "password": "Changed9"},
    )

    assert response.status_code == 200


def test_update_user_with_taken_email_returns_409(authenticated_client):
    _seed(authenticated_client)

    response = authenticated_client.put("/api/v1/users/ABC2024002", json={"email": "a@x.com"})

    assert response.status_code == 409


def test_update_missing_user_returns_404(authenticated_client):
    response = authenticated_client.put("/api/v1/users/no-such-id", json={})
    assert response.status_code == 404


def test_delete_user(authenticated_client, data_file):
    _seed(authenticated_client)

    response = authenticated_client.delete("/api/v1/users/ABC2024001")

    assert response.status_code == 204
    assert [u["loginId"] for u in read_document(data_file)["users"]] == ["ABC2024002"]
    assert authenticated_client.delete("/api/v1/users/ABC2024001").status_code == 404


def test_delete_user_requires_admin_role(client, mock_user_employee):
    _seed(client)
    app.dependency_overrides[get_current_user] = lambda: mock_user_employee

    response = client.delete("/api/v1/users/ABC2024001")

    assert response.status_code == 403


def _bearer(client, identifier: str, password: str) -> dict[str, str]:
    response = client.post("/api/v1/auth/login", json={"identifier": identifier, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_signup_ignores_requested_role(client):
    _seed(client)

    response = client.post(
        "/api/v1/auth/signup",
        json={**ALICE, "loginId": "ABC2024003", "email": "c@x.com", "role": "Admin"},
    )

    assert response.status_code == 201
    assert response.json()["role"] == "Employee"


def test_employee_cannot_change_another_users_password(client, data_file):
    _seed(client)
    headers = _bearer(client, BOB["loginId"], BOB["password"])
    before = read_document(data_file)["users"][0]

    response = client.put(f"/api/v1/users/{ALICE['loginId']}", json={"password": "pwned"}, headers=headers)

    assert response.status_code == 403
    assert read_document(data_file)["users"][0] == before
    login = client.post("/api/v1/auth/login", json={"identifier": ALICE["loginId"], "password": "pwned"})
    assert login.status_code == 401


def test_employee_cannot_make_itself_admin(client, data_file):
    _seed(client)
    headers = _bearer(client, BOB["loginId"], BOB["password"])

    response = client.put(
        f"/api/v1/users/{BOB['loginId']}",
        json={"role": "Admin", "companyName": "Globex", "phone": "+1 555 0199"},
        headers=headers,
    )

    assert response.status_code == 200
    stored = read_document(data_file)["users"][1]
    assert stored["role"] == "Employee"
    assert stored["companyName"] == "Acme Corp"
    assert stored["phone"] == "+1 555 0199"


def test_owner_can_change_own_password(client):
    _seed(client)
    headers = _bearer(client, BOB["loginId"], BOB["password"])

    response = client.put(f"/api/v1/users/{BOB['loginId']}", json={"password": "Changed9"}, headers=headers)

    assert response.status_code == 200
    assert _bearer(client, BOB["loginId"], "Changed9")


def test_admin_can_update_colleague(client):
    _seed(client)
    headers = _bearer(client, ALICE["loginId"], ALICE["password"])

    response = client.put(f"/api/v1/users/{BOB['loginId']}", json={"name": "Robert Stone"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Robert Stone"


def test_employee_token_cannot_delete_users(client, data_file):
    _seed(client)
    headers = _bearer(client, BOB["loginId"], BOB["password"])

    response = client.delete(f"/api/v1/users/{ALICE['loginId']}", headers=headers)

    assert response.status_code == 403
    assert [u["loginId"] for u in read_document(data_file)["users"]] == [ALICE["loginId"], BOB["loginId"]]


def test_admin_of_another_company_cannot_manage_users(client, data_file):
    _seed(client)
    globex = {**ALICE, "loginId": "GLX2024001", "email": "g@x.com", "companyName": "Globex"}
    assert client.post("/api/v1/auth/signup", json=globex).json()["role"] == "Admin"
    headers = _bearer(client, globex["loginId"], globex["password"])

    update = client.put(f"/api/v1/users/{ALICE['loginId']}", json={"password": "pwned"}, headers=headers)
    delete = client.delete(f"/api/v1/users/{ALICE['loginId']}", headers=headers)

    assert update.status_code == 403
    assert delete.status_code == 403
    assert len(read_document(data_file)["users"]) == 3
