def test_create_and_list_categories(client, api, headers):
    api.category(headers, name="Hotel")
    api.category(headers, name="Alimentação", color="#f97316")

    res = client.get("/categories/", headers=headers)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total"] == 2
    assert [c["name"] for c in data["items"]] == ["Alimentação", "Hotel"]


def test_category_name_is_unique_ignoring_case(client, api, headers):
    api.category(headers, name="Hotel")

    res = client.post("/categories/", json={"name": "  hotel "}, headers=headers)

    assert res.status_code == 409
    assert res.json()["error_code"] == "CATEGORY_NAME_EXISTS"


def test_category_color_must_be_hex(client, headers):
    res = client.post("/categories/", json={"name": "Táxi", "color": "blue"}, headers=headers)

    assert res.status_code == 422
    assert res.json()["error_code"] == "VALIDATION_ERROR"


def test_inactive_categories_hidden_by_default(client, api, headers):
    category = api.category(headers, name="Pedágio")

    res = client.patch(
        f"/categories/{category['id']}",
        json={"is_active": False, "version": category["version"]},
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["version"] == category["version"] + 1

    visible = client.get("/categories/", headers=headers).json()["data"]
    assert visible["total"] == 0

    everything = client.get(
        "/categories/", params={"include_inactive": True}, headers=headers
    ).json()["data"]
    assert everything["total"] == 1


def test_update_category_version_conflict(client, api, headers):
    category = api.category(headers)

    client.patch(
        f"/categories/{category['id']}",
        json={"icon": "hotel", "version": category["version"]},
        headers=headers,
    )
    res = client.patch(
        f"/categories/{category['id']}",
        json={"icon": "home", "version": category["version"]},
        headers=headers,
    )

    assert res.status_code == 409
    assert res.json()["error_code"] == "CATEGORY_VERSION_CONFLICT"


def test_delete_category_in_use(client, api, headers):
    category = api.category(headers)
    report = api.report(headers)
    api.expense(headers, report["id"], category["id"])

    res = client.delete(f"/categories/{category['id']}", headers=headers)

    assert res.status_code == 400
    body = res.json()
    assert body["error_code"] == "CATEGORY_IN_USE"
    assert body["details"] == {"expense_count": 1}


def test_delete_unused_category(client, api, headers):
    category = api.category(headers)

    res = client.delete(f"/categories/{category['id']}", headers=headers)
    assert res.status_code == 200

    res = client.get(f"/categories/{category['id']}", headers=headers)
    assert res.status_code == 404
    assert res.json()["error_code"] == "CATEGORY_NOT_FOUND"


def test_categories_require_authentication(client):
    res = client.get("/categories/")
    assert res.status_code == 401
