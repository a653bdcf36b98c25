from datetime import date, timedelta
from decimal import Decimal

from app.services.dashboard.dashboard_service import CHART_MONTHS, _shift_month


def _previous_month_day(today: date) -> date:
    return today.replace(day=1) - timedelta(days=1)


def test_metrics_for_current_month(client, api, headers):
    today = date.today()
    report = api.report(headers, title="Mês atual")
    hotel = api.category(headers, name="Hotel", color="#ec4899")
    mileage = api.category(headers, name="Quilometragem")
    vehicle = api.vehicle(headers, rate="0.80")

    api.expense(headers, report["id"], hotel["id"], amount="200.00", expense_date=today.isoformat())
    api.expense(
        headers,
        report["id"],
        mileage["id"],
        amount="40.00",
        expense_date=today.isoformat(),
        vehicle_id=vehicle["id"],
        distance_km="50",
        origin="A",
        destination="B",
    )
    api.expense(
        headers,
        report["id"],
        hotel["id"],
        amount="120.00",
        expense_date=_previous_month_day(today).isoformat(),
        reimbursable=False,
    )

    res = client.get("/dashboard/metrics", headers=headers)

    assert res.status_code == 200
    data = res.json()["data"]
    month = data["month_expenses"]
    assert Decimal(month["amount"]) == Decimal("240.00")
    assert month["count"] == 2
    assert month["amount_change_pct"] == 100.0
    assert month["count_change_pct"] == 100.0

    assert data["active_reports"] == 1
    assert Decimal(data["pending_reimbursement"]["amount"]) == Decimal("240.00")
    assert data["pending_reimbursement"]["count"] == 2
    assert Decimal(data["month_mileage"]["distance_km"]) == Decimal("50.00")
    assert Decimal(data["month_mileage"]["amount"]) == Decimal("40.00")

    assert len(data["recent_expenses"]) == 3
    assert data["recent_expenses"][0]["report_title"] == "Mês atual"
    assert [r["title"] for r in data["recent_reports"]] == ["Mês atual"]


def test_metrics_on_empty_database(client, headers):
    data = client.get("/dashboard/metrics", headers=headers).json()["data"]

    assert Decimal(data["month_expenses"]["amount"]) == Decimal("0")
    assert data["month_expenses"]["amount_change_pct"] == 0.0
    assert data["active_reports"] == 0
    assert data["recent_expenses"] == []


def test_charts(client, api, headers):
    today = date.today()
    report = api.report(headers)
    hotel = api.category(headers, name="Hotel", color="#ec4899")
    food = api.category(headers, name="Alimentação", color=None)

    api.expense(headers, report["id"], hotel["id"], amount="300.00", expense_date=today.isoformat())
    api.expense(headers, report["id"], food["id"], amount="50.00", expense_date=today.isoformat())
    api.expense(headers, report["id"], food["id"], amount="25.00", expense_date=today.isoformat())

    res = client.get("/dashboard/charts", headers=headers)

    assert res.status_code == 200
    data = res.json()["data"]

    assert [s["name"] for s in data["by_category"]] == ["Hotel", "Alimentação"]
    assert data["by_category"][1]["count"] == 2
    assert data["by_category"][1]["color"] == "#6b7280"
    assert Decimal(data["by_category_total"]) == Decimal("375.00")

    months = [p["month"] for p in data["monthly_expenses"]]
    assert len(months) == CHART_MONTHS
    assert months[-1] == today.strftime("%Y-%m")
    assert months == sorted(months)
    assert Decimal(data["monthly_expenses"][-1]["amount"]) == Decimal("375.00")
    assert data["monthly_expenses"][-1]["count"] == 3
    assert all(p["trips"] == 0 for p in data["monthly_mileage"])


def test_shift_month_crosses_years():
    assert _shift_month(date(2024, 1, 15), -1) == date(2023, 12, 1)
    assert _shift_month(date(2024, 11, 1), 3) == date(2025, 2, 1)
    assert _shift_month(date(2024, 6, 30), 0) == date(2024, 6, 1)
