from decimal import Decimal


def test_create_report_returns_balance_block(client, api, headers):
    report = api.report(headers, advance="500.00")

    assert report["status"] == "in_progress"
    assert report["created_by_name"] == "Traveler"
    assert report["expense_count"] == 0
    assert Decimal(report["total_amount"]) == Decimal("0")
    assert report["direction"] == "A_DEVOLVER"
    assert report["reimbursement"]["label"] == "A DEVOLVER: R$ 500.00"
    assert report["balance_display"] == {
        "text": "+R$ 500.00",
        "color_tag": "green",
        "status": "positive",
    }


def test_negative_advance_is_rejected_with_reason(client, headers):
    res = client.post(
        "/reports/",
        json={
            "title": "Viagem",
            "start_date": "2024-03-01",
            "end_date": "2024-03-02",
            "advance": "-1.00",
        },
        headers=headers,
    )

    assert res.status_code == 400
    body = res.json()
    assert body["error_code"] == "REPORT_ADVANCE_INVALID"
    assert body["details"] == {"field": "advance", "reason": "negative"}


def test_advance_above_maximum_is_rejected(client, headers):
    res = client.post(
        "/reports/",
        json={
            "title": "Viagem",
            "start_date": "2024-03-01",
            "end_date": "2024-03-02",
            "advance": "100000.01",
        },
        headers=headers,
    )

    assert res.status_code == 400
    assert res.json()["details"]["reason"] == "exceeds-maximum"


def test_huge_advance_is_rejected_with_reason(client, api, headers):
    res = client.post(
        "/reports/",
        json={
            "title": "Viagem",
            "start_date": "2024-03-01",
            "end_date": "2024-03-02",
            "advance": 1e30,
        },
        headers=headers,
    )

    assert res.status_code == 400
    body = res.json()
    assert body["error_code"] == "REPORT_ADVANCE_INVALID"
    assert body["details"] == {"field": "advance", "reason": "exceeds-maximum"}

    report = api.report(headers)
    res = client.patch(
        f"/reports/{report['id']}",
        json={"advance": "1" + "0" * 40, "version": report["version"]},
        headers=headers,
    )

    assert res.status_code == 400
    assert res.json()["details"]["reason"] == "exceeds-maximum"


def test_end_date_before_start_date(client, headers):
    res = client.post(
        "/reports/",
        json={"title": "Viagem", "start_date": "2024-03-05", "end_date": "2024-03-01"},
        headers=headers,
    )

    assert res.status_code == 422


def test_balance_follows_expenses(client, api, headers):
    category = api.category(headers)
    report = api.report(headers, advance="300.00")
    api.expense(headers, report["id"], category["id"], amount="120.50")
    api.expense(headers, report["id"], category["id"], amount="250.00")

    res = client.get(f"/reports/{report['id']}/balance", headers=headers)

    assert res.status_code == 200
    block = res.json()["data"]
    assert Decimal(block["balance"]["total_spent"]) == Decimal("370.50")
    assert Decimal(block["balance"]["remainder"]) == Decimal("-70.50")
    assert Decimal(block["balance"]["reimbursement_amount"]) == Decimal("70.50")
    assert block["balance"]["direction"] == "A_RECEBER"
    assert block["reimbursement"]["label"] == "A RECEBER: R$ 70.50"
    assert block["reimbursement"]["status"] == "pendente"
    assert block["balance_display"]["text"] == "-R$ 70.50"

    detail = client.get(f"/reports/{report['id']}", headers=headers).json()["data"]
    assert detail["expense_count"] == 2
    assert len(detail["expenses"]) == 2


def test_settled_report(client, api, headers):
    category = api.category(headers)
    report = api.report(headers, advance="100.00")
    api.expense(headers, report["id"], category["id"], amount="100.00")

    block = client.get(f"/reports/{report['id']}/balance", headers=headers).json()["data"]

    assert block["balance"]["direction"] == "QUITADO"
    assert block["reimbursement"]["label"] == "QUITADO: R$ 0.00"
    assert block["reimbursement"]["status"] == "processado"
    assert block["balance_display"]["color_tag"] == "gray"


def test_list_reports_with_totals_and_filters(client, api, headers):
    category = api.category(headers)
    march = api.report(headers, advance="50.00")
    api.report(
        headers,
        title="Feira Curitiba",
        start_date="2024-05-10",
        end_date="2024-05-12",
        destination="Curitiba",
    )
    api.expense(headers, march["id"], category["id"], amount="80.00")

    res = client.get("/reports/", headers=headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total"] == 2
    # newest trip first
    assert [r["title"] for r in data["items"]] == ["Feira Curitiba", "Visita cliente SP"]
    assert Decimal(data["items"][1]["total_amount"]) == Decimal("80.00")
    assert Decimal(data["items"][1]["remainder"]) == Decimal("-30.00")
    assert data["items"][0]["expense_count"] == 0

    found = client.get("/reports/", params={"search": "curitiba"}, headers=headers).json()["data"]
    assert found["total"] == 1

    ranged = client.get(
        "/reports/",
        params={"date_from": "2024-03-01", "date_to": "2024-03-31"},
        headers=headers,
    ).json()["data"]
    assert [r["id"] for r in ranged["items"]] == [march["id"]]


def test_update_report(client, api, headers):
    report = api.report(headers)

    res = client.patch(
        f"/reports/{report['id']}",
        json={"advance": "250.00", "notes": "Hotel pago pela empresa", "version": report["version"]},
        headers=headers,
    )

    assert res.status_code == 200
    updated = res.json()["data"]
    assert Decimal(updated["advance"]) == Decimal("250.00")
    assert updated["notes"] == "Hotel pago pela empresa"
    assert updated["version"] == report["version"] + 1
    assert updated["direction"] == "A_DEVOLVER"

    stale = client.patch(
        f"/reports/{report['id']}",
        json={"title": "Outro", "version": report["version"]},
        headers=headers,
    )
    assert stale.status_code == 409
    assert stale.json()["error_code"] == "REPORT_VERSION_CONFLICT"


def test_update_report_checks_dates_against_stored_values(client, api, headers):
    report = api.report(headers)

    res = client.patch(
        f"/reports/{report['id']}",
        json={"end_date": "2024-02-20", "version": report["version"]},
        headers=headers,
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "REPORT_DATE_RANGE_INVALID"


def test_update_report_without_changes(client, api, headers):
    report = api.report(headers)

    res = client.patch(
        f"/reports/{report['id']}",
        json={"title": report["title"], "version": report["version"]},
        headers=headers,
    )

    assert res.status_code == 400
    assert res.json()["message"] == "No changes detected"


def test_delete_report_with_expenses_is_refused(client, api, headers):
    category = api.category(headers)
    report = api.report(headers)
    api.expense(headers, report["id"], category["id"])

    res = client.delete(f"/reports/{report['id']}", headers=headers)
    assert res.status_code == 400
    assert res.json()["error_code"] == "REPORT_HAS_EXPENSES"

    empty = api.report(headers, title="Vazio")
    res = client.delete(f"/reports/{empty['id']}", headers=headers)
    assert res.status_code == 200
    assert client.get(f"/reports/{empty['id']}", headers=headers).status_code == 404


def test_reimburse_and_reverse(client, api, headers):
    category = api.category(headers)
    report = api.report(headers)
    api.expense(headers, report["id"], category["id"], amount="10.00")
    api.expense(headers, report["id"], category["id"], amount="20.00")
    api.expense(headers, report["id"], category["id"], amount="30.00", reimbursable=False)

    res = client.post(f"/reports/{report['id']}/reimburse", headers=headers)
    assert res.status_code == 200
    assert res.json()["data"] == {
        "report_id": report["id"],
        "reimbursed_expenses": 2,
        "new_status": "reimbursed",
    }

    detail = client.get(f"/reports/{report['id']}", headers=headers).json()["data"]
    assert detail["status"] == "reimbursed"
    assert sorted(e["reimbursed"] for e in detail["expenses"]) == [False, True, True]

    # nothing left to flip
    again = client.post(f"/reports/{report['id']}/reimburse", headers=headers)
    assert again.json()["data"]["reimbursed_expenses"] == 0

    res = client.post(f"/reports/{report['id']}/reverse", headers=headers)
    assert res.status_code == 200
    assert res.json()["data"] == {
        "report_id": report["id"],
        "reversed_expenses": 2,
        "new_status": "in_progress",
    }


def test_reimburse_missing_report(client, headers):
    res = client.post("/reports/404/reimburse", headers=headers)

    assert res.status_code == 404
    assert res.json()["error_code"] == "REPORT_NOT_FOUND"


def test_report_pdf(client, api, headers):
    category = api.category(headers)
    vehicle = api.vehicle(headers)
    mileage = api.category(headers, name="Quilometragem")
    report = api.report(headers, advance="200.00", notes="Reunião <anual> & visita")
    api.expense(headers, report["id"], category["id"], amount="150.00", supplier="Hotel Ibis")
    api.expense(
        headers,
        report["id"],
        mileage["id"],
        amount="45.00",
        vehicle_id=vehicle["id"],
        distance_km="50",
        origin="Campinas",
        destination="São Paulo",
    )

    res = client.get(f"/reports/{report['id']}/pdf", headers=headers)

    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert res.content.startswith(b"%PDF")
