from collections import OrderedDict
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import raiseload

from app.models.expenses.expense_models import Expense, MileageExpense
from app.models.masters.category_models import Category
from app.models.reports.report_models import Report
from app.models.enums.report_status import ReportStatus
from app.schemas.dashboard.dashboard_schemas import (
    DashboardMetrics,
    DashboardCharts,
    ExpenseTotals,
    PendingReimbursement,
    MileageTotals,
    RecentExpense,
    RecentReport,
    CategorySlice,
    MonthlyExpensePoint,
    MonthlyMileagePoint,
)
from app.utils.decimal_utils import ZERO, to_decimal, sum_decimals, percent_change
from app.utils.logger import get_logger

logger = get_logger(__name__)

CHART_MONTHS = 6
DEFAULT_CATEGORY_COLOR = "#6b7280"


def _shift_month(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


async def _expense_totals(db: AsyncSession, start: date, end: date):
    row = (
        await db.execute(
            select(
                func.coalesce(func.sum(Expense.amount), 0),
                func.count(Expense.id),
            ).where(
                Expense.expense_date >= start,
                Expense.expense_date < end,
            )
        )
    ).one()
    return to_decimal(row[0]), row[1]


# =========================
# METRICS
# =========================
async def get_metrics(db: AsyncSession, today: date | None = None) -> DashboardMetrics:
    today = today or date.today()
    month_start = today.replace(day=1)
    next_month = _shift_month(month_start, 1)
    prev_month = _shift_month(month_start, -1)

    amount, count = await _expense_totals(db, month_start, next_month)
    prev_amount, prev_count = await _expense_totals(db, prev_month, month_start)

    active_reports = await db.scalar(
        select(func.count(Report.id)).where(Report.status == ReportStatus.in_progress)
    ) or 0

    pending = (
        await db.execute(
            select(
                func.coalesce(func.sum(Expense.amount), 0),
                func.count(Expense.id),
            ).where(
                Expense.reimbursable.is_(True),
                Expense.reimbursed.is_(False),
            )
        )
    ).one()

    trips = (
        await db.execute(
            select(MileageExpense.distance_km, MileageExpense.rate_per_km)
            .join(Expense, Expense.id == MileageExpense.expense_id)
            .where(
                Expense.expense_date >= month_start,
                Expense.expense_date < next_month,
            )
        )
    ).all()

    recent_expenses = (
        await db.execute(
            select(Expense, Category.name, Category.color, Report.title)
            .join(Category, Category.id == Expense.category_id)
            .join(Report, Report.id == Expense.report_id)
            .options(
                raiseload(Expense.report),
                raiseload(Expense.category),
                raiseload(Expense.mileage),
                raiseload(Expense.receipts),
            )
            .order_by(Expense.created_at.desc(), Expense.id.desc())
            .limit(5)
        )
    ).all()

    recent_reports = (
        await db.execute(
            select(Report)
            .options(raiseload(Report.expenses))
            .order_by(
                func.coalesce(Report.updated_at, Report.created_at).desc(),
                Report.id.desc(),
            )
            .limit(5)
        )
    ).scalars().all()

    logger.debug(
        "Dashboard metrics computed",
        extra={"month": _month_key(month_start), "expenses": count},
    )

    return DashboardMetrics(
        month_expenses=ExpenseTotals(
            amount=amount,
            count=count,
            amount_change_pct=percent_change(amount, prev_amount),
            count_change_pct=percent_change(count, prev_count),
        ),
        active_reports=active_reports,
        pending_reimbursement=PendingReimbursement(
            amount=to_decimal(pending[0]),
            count=pending[1],
        ),
        month_mileage=MileageTotals(
            distance_km=sum_decimals(t.distance_km for t in trips),
            amount=sum_decimals(
                to_decimal(t.distance_km) * to_decimal(t.rate_per_km) for t in trips
            ),
        ),
        recent_expenses=[
            RecentExpense(
                id=e.id,
                expense_date=e.expense_date,
                description=e.description,
                amount=to_decimal(e.amount),
                category_name=category_name,
                category_color=category_color,
                report_title=report_title,
            )
            for e, category_name, category_color, report_title in recent_expenses
        ],
        recent_reports=[
            RecentReport(
                id=r.id,
                title=r.title,
                status=r.status,
                updated_at=r.updated_at or r.created_at,
            )
            for r in recent_reports
        ],
    )


# =========================
# CHARTS
# =========================
async def get_charts(db: AsyncSession, today: date | None = None) -> DashboardCharts:
    today = today or date.today()
    window_end = _shift_month(today.replace(day=1), 1)
    window_start = _shift_month(window_end, -CHART_MONTHS)

    by_category = (
        await db.execute(
            select(
                Category.name,
                Category.color,
                func.sum(Expense.amount).label("value"),
                func.count(Expense.id).label("count"),
            )
            .join(Category, Category.id == Expense.category_id)
            .where(
                Expense.expense_date >= window_start,
                Expense.expense_date < window_end,
            )
            .group_by(Category.id, Category.name, Category.color)
        )
    ).all()

    slices = sorted(
        (
            CategorySlice(
                name=name,
                value=to_decimal(value),
                count=count,
                color=color or DEFAULT_CATEGORY_COLOR,
            )
            for name, color, value, count in by_category
        ),
        key=lambda s: s.value,
        reverse=True,
    )

    # month buckets are filled in Python to stay dialect neutral
    months: "OrderedDict[str, dict]" = OrderedDict()
    for offset in range(CHART_MONTHS):
        key = _month_key(_shift_month(window_start, offset))
        months[key] = {
            "amount": ZERO,
            "count": 0,
            "distance_km": ZERO,
            "trips": 0,
            "mileage_amount": ZERO,
        }

    expense_rows = (
        await db.execute(
            select(Expense.expense_date, Expense.amount).where(
                Expense.expense_date >= window_start,
                Expense.expense_date < window_end,
            )
        )
    ).all()

    for expense_date, amount in expense_rows:
        bucket = months[_month_key(expense_date)]
        bucket["amount"] += to_decimal(amount)
        bucket["count"] += 1

    mileage_rows = (
        await db.execute(
            select(
                Expense.expense_date,
                MileageExpense.distance_km,
                MileageExpense.rate_per_km,
            )
            .join(Expense, Expense.id == MileageExpense.expense_id)
            .where(
                Expense.expense_date >= window_start,
                Expense.expense_date < window_end,
            )
        )
    ).all()

    for expense_date, distance, rate in mileage_rows:
        bucket = months[_month_key(expense_date)]
        bucket["distance_km"] += to_decimal(distance)
        bucket["trips"] += 1
        bucket["mileage_amount"] += to_decimal(to_decimal(distance) * to_decimal(rate))

    return DashboardCharts(
        by_category=slices,
        by_category_total=sum_decimals(s.value for s in slices),
        monthly_expenses=[
            MonthlyExpensePoint(month=key, amount=b["amount"], count=b["count"])
            for key, b in months.items()
        ],
        monthly_mileage=[
            MonthlyMileagePoint(
                month=key,
                distance_km=b["distance_km"],
                trips=b["trips"],
                amount=b["mileage_amount"],
            )
            for key, b in months.items()
        ],
    )
