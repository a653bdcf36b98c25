from conftest import PASSWORD


def test_register_returns_session_and_sets_cookie(client, api):
    res = client.post(
        "/auth/register",
        json={
            "name": "Maria Silva",
            "email": "maria@rdv.com",
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        },
    )

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "maria@rdv.com"
    assert body["data"]["user"]["role"] == "user"
    assert body["data"]["token_type"] == "bearer"
    assert "session" in res.cookies

    # the cookie alone authenticates
    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Maria Silva"


def test_register_rejects_duplicate_email(client, api):
    api.register(email="dup@rdv.com")

    res = client.post(
        "/auth/register",
        json={
            "name": "Other",
            "email": "dup@rdv.com",
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        },
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "USER_EMAIL_EXISTS"


def test_register_password_mismatch_is_validation_error(client):
    res = client.post(
        "/auth/register",
        json={
            "name": "Maria",
            "email": "maria@rdv.com",
            "password": PASSWORD,
            "confirm_password": "different",
        },
    )

    assert res.status_code == 422
    body = res.json()
    assert body["success"] is False
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["details"]


def test_login_and_me_with_bearer(client, api):
    api.register(email="joao@rdv.com", name="João")
    client.cookies.clear()

    res = client.post("/auth/login", json={"email": "joao@rdv.com", "password": PASSWORD})
    assert res.status_code == 200
    token = res.json()["data"]["access_token"]
    client.cookies.clear()

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "joao@rdv.com"


def test_login_wrong_password(client, api):
    api.register(email="joao@rdv.com")

    res = client.post("/auth/login", json={"email": "joao@rdv.com", "password": "wrong-pass"})

    assert res.status_code == 401
    assert res.json()["error_code"] == "INVALID_CREDENTIALS"


def test_me_requires_authentication(client):
    res = client.get("/auth/me")

    assert res.status_code == 401
    assert res.json() == {
        "success": False,
        "message": "Not authenticated",
        "error_code": "UNAUTHORIZED",
        "details": None,
    }


def test_malformed_token_is_rejected(client):
    res = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_logout_invalidates_issued_tokens(client, api, headers):
    res = client.post("/auth/logout", headers=headers)
    assert res.status_code == 200

    res = client.get("/auth/me", headers=headers)
    assert res.status_code == 401
    assert res.json()["message"] == "Session expired"


def test_activity_log_records_logins(client, api):
    api.register(email="maria@rdv.com", name="Maria")
    admin = api.admin_headers()

    res = client.get("/activities/", params={"code": "LOGIN"}, headers=admin)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total"] == 1
    entry = data["items"][0]
    assert entry["code"] == "LOGIN"
    assert entry["actor_email"] == "admin@rdv.com"
    assert entry["message"] == "Admin (admin@rdv.com) logged in"

    registered = client.get(
        "/activities/", params={"search": "maria"}, headers=admin
    ).json()["data"]
    assert [a["code"] for a in registered["items"]] == ["REGISTER"]
