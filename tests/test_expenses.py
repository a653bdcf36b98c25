from decimal import Decimal

import pytest


@pytest.fixture
def setup(api, headers):
    return {
        "report": api.report(headers),
        "hotel": api.category(headers, name="Hotel"),
        "mileage": api.category(headers, name="Quilometragem", color="#64748b"),
        "vehicle": api.vehicle(headers, rate="0.90"),
    }


def _trip(vehicle_id, **extra):
    return {
        "vehicle_id": vehicle_id,
        "distance_km": "120.5",
        "origin": "Campinas",
        "destination": "São Paulo",
        **extra,
    }


def test_create_expense(client, api, headers, setup):
    expense = api.expense(
        headers,
        setup["report"]["id"],
        setup["hotel"]["id"],
        amount="350.00",
        supplier="Hotel Ibis",
    )

    assert Decimal(expense["amount"]) == Decimal("350.00")
    assert expense["category"]["name"] == "Hotel"
    assert expense["report"] == {"id": setup["report"]["id"], "title": "Visita cliente SP"}
    assert expense["mileage"] is None
    assert expense["receipts"] == []
    assert expense["reimbursable"] is True
    assert expense["reimbursed"] is False


def test_create_expense_for_missing_report(client, headers, setup):
    res = client.post(
        "/expenses/",
        json={
            "report_id": 999,
            "category_id": setup["hotel"]["id"],
            "expense_date": "2024-03-02",
            "description": "Diária",
            "amount": "10.00",
        },
        headers=headers,
    )

    assert res.status_code == 404
    assert res.json()["error_code"] == "REPORT_NOT_FOUND"


def test_amount_must_be_positive(client, headers, setup):
    res = client.post(
        "/expenses/",
        json={
            "report_id": setup["report"]["id"],
            "category_id": setup["hotel"]["id"],
            "expense_date": "2024-03-02",
            "description": "Diária",
            "amount": "0",
        },
        headers=headers,
    )

    assert res.status_code == 422


def test_mileage_expense_snapshots_vehicle_rate(client, api, headers, setup):
    expense = api.expense(
        headers,
        setup["report"]["id"],
        setup["mileage"]["id"],
        amount="108.45",
        **_trip(setup["vehicle"]["id"]),
    )

    mileage = expense["mileage"]
    assert Decimal(mileage["distance_km"]) == Decimal("120.50")
    assert Decimal(mileage["rate_per_km"]) == Decimal("0.90")
    assert Decimal(mileage["mileage_amount"]) == Decimal("108.45")
    assert mileage["vehicle"]["identification"] == "ABC1D23"

    vehicle = setup["vehicle"]
    client.patch(
        f"/vehicles/{vehicle['id']}",
        json={"rate_per_km": "1.50", "version": vehicle["version"]},
        headers=headers,
    )

    stored = client.get(f"/expenses/{expense['id']}", headers=headers).json()["data"]
    assert Decimal(stored["mileage"]["rate_per_km"]) == Decimal("0.90")


def test_mileage_expense_requires_trip_fields(client, headers, setup):
    res = client.post(
        "/expenses/",
        json={
            "report_id": setup["report"]["id"],
            "category_id": setup["mileage"]["id"],
            "expense_date": "2024-03-02",
            "description": "Ida ao cliente",
            "amount": "50.00",
            "vehicle_id": setup["vehicle"]["id"],
        },
        headers=headers,
    )

    assert res.status_code == 400
    body = res.json()
    assert body["error_code"] == "EXPENSE_MILEAGE_FIELDS_REQUIRED"
    assert body["details"]["missing"] == ["distance_km", "origin", "destination"]


def test_mileage_expense_rejects_inactive_vehicle(client, api, headers, setup):
    vehicle = setup["vehicle"]
    client.patch(
        f"/vehicles/{vehicle['id']}",
        json={"is_active": False, "version": vehicle["version"]},
        headers=headers,
    )

    res = client.post(
        "/expenses/",
        json={
            "report_id": setup["report"]["id"],
            "category_id": setup["mileage"]["id"],
            "expense_date": "2024-03-02",
            "description": "Ida ao cliente",
            "amount": "50.00",
            **_trip(vehicle["id"]),
        },
        headers=headers,
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "VEHICLE_INACTIVE"


def test_partial_trip_edit_keeps_stored_fields(client, api, headers, setup):
    expense = api.expense(
        headers,
        setup["report"]["id"],
        setup["mileage"]["id"],
        amount="108.45",
        **_trip(setup["vehicle"]["id"]),
    )

    res = client.patch(
        f"/expenses/{expense['id']}",
        json={"distance_km": "200", "version": expense["version"]},
        headers=headers,
    )

    assert res.status_code == 200
    mileage = res.json()["data"]["mileage"]
    assert Decimal(mileage["distance_km"]) == Decimal("200.00")
    assert mileage["origin"] == "Campinas"
    assert Decimal(mileage["mileage_amount"]) == Decimal("180.00")


def test_moving_out_of_mileage_drops_trip(client, api, headers, setup):
    expense = api.expense(
        headers,
        setup["report"]["id"],
        setup["mileage"]["id"],
        amount="108.45",
        **_trip(setup["vehicle"]["id"]),
    )

    res = client.patch(
        f"/expenses/{expense['id']}",
        json={"category_id": setup["hotel"]["id"], "version": expense["version"]},
        headers=headers,
    )

    assert res.status_code == 200
    updated = res.json()["data"]
    assert updated["category"]["name"] == "Hotel"
    assert updated["mileage"] is None


def test_moving_into_mileage_needs_trip(client, api, headers, setup):
    expense = api.expense(headers, setup["report"]["id"], setup["hotel"]["id"])

    res = client.patch(
        f"/expenses/{expense['id']}",
        json={"category_id": setup["mileage"]["id"], "version": expense["version"]},
        headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["error_code"] == "EXPENSE_MILEAGE_FIELDS_REQUIRED"

    res = client.patch(
        f"/expenses/{expense['id']}",
        json={
            "category_id": setup["mileage"]["id"],
            "version": expense["version"],
            **_trip(setup["vehicle"]["id"]),
        },
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["mileage"]["origin"] == "Campinas"


def test_update_expense_version_conflict(client, api, headers, setup):
    expense = api.expense(headers, setup["report"]["id"], setup["hotel"]["id"])

    ok = client.patch(
        f"/expenses/{expense['id']}",
        json={"amount": "125.00", "version": expense["version"]},
        headers=headers,
    )
    assert ok.status_code == 200

    stale = client.patch(
        f"/expenses/{expense['id']}",
        json={"amount": "130.00", "version": expense["version"]},
        headers=headers,
    )
    assert stale.status_code == 409
    assert stale.json()["error_code"] == "EXPENSE_VERSION_CONFLICT"


def test_list_expenses_filters_and_pages(client, api, headers, setup):
    report = setup["report"]
    for day in range(1, 6):
        api.expense(
            headers,
            report["id"],
            setup["hotel"]["id"],
            expense_date=f"2024-03-0{day}",
            description=f"Diária {day}",
        )
    api.expense(
        headers,
        report["id"],
        setup["hotel"]["id"],
        description="Jantar",
        supplier="Restaurante Fasano",
        reimbursable=False,
    )

    page = client.get(
        "/expenses/",
        params={"report_id": report["id"], "page_size": 4},
        headers=headers,
    ).json()["data"]
    assert page["total"] == 6
    assert page["total_pages"] == 2
    assert len(page["items"]) == 4
    dates = [e["expense_date"] for e in page["items"]]
    assert dates == sorted(dates, reverse=True)

    found = client.get("/expenses/", params={"search": "fasano"}, headers=headers).json()["data"]
    assert [e["description"] for e in found["items"]] == ["Jantar"]

    ranged = client.get(
        "/expenses/",
        params={"date_from": "2024-03-04", "date_to": "2024-03-05"},
        headers=headers,
    ).json()["data"]
    assert ranged["total"] == 2

    client.post(f"/reports/{report['id']}/reimburse", headers=headers)
    pending = client.get("/expenses/", params={"reimbursed": False}, headers=headers).json()["data"]
    assert [e["description"] for e in pending["items"]] == ["Jantar"]


def test_delete_expense(client, api, headers, setup):
    expense = api.expense(headers, setup["report"]["id"], setup["hotel"]["id"])

    res = client.delete(f"/expenses/{expense['id']}", headers=headers)
    assert res.status_code == 200

    res = client.get(f"/expenses/{expense['id']}", headers=headers)
    assert res.status_code == 404
    assert res.json()["error_code"] == "EXPENSE_NOT_FOUND"
