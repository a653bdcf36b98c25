from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.orm import raiseload

from app.models.reports.report_models import Report
from app.models.expenses.expense_models import Expense
from app.models.enums.report_status import ReportStatus
from app.models.users.user_models import User
from app.schemas.reports.report_schemas import (
    ReportCreate,
    ReportUpdate,
    ReportSummaryOut,
    ReportOut,
    ReportListData,
    ReimbursementResult,
    ReversalResult,
)
from app.schemas.reports.balance_schemas import ReportBalanceOut
from app.schemas.expenses.expense_schemas import ExpenseOut
from app.services.reports.balance_calculator import (
    compute_balance,
    compute_balance_from_expenses,
    format_balance,
    format_reimbursement,
    validate_advance,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_user_activity
from app.utils.decimal_utils import to_decimal
from app.utils.response import page_meta
from app.utils.logger import get_logger

logger = get_logger(__name__)

NULLABLE_FIELDS = {"destination", "purpose", "client", "notes"}


# =========================
# HELPERS
# =========================
def _ensure_valid_advance(advance) -> None:
    check = validate_advance(advance)
    if not check.valid:
        raise AppException(
            400,
            check.error,
            ErrorCode.REPORT_ADVANCE_INVALID,
            details={"field": "advance", "reason": check.reason},
        )


async def load_report(db: AsyncSession, report_id: int) -> Report:
    """Fresh load with expenses, used after writes so nothing is stale."""
    stmt = (
        select(Report)
        .where(Report.id == report_id)
        .execution_options(populate_existing=True)
    )
    report = await db.scalar(stmt)
    if not report:
        raise AppException.not_found("Report", ErrorCode.REPORT_NOT_FOUND)
    return report


def _summary_fields(report: Report, total, count: int) -> dict:
    balance = compute_balance(report.advance, total)
    return {
        "id": report.id,
        "title": report.title,
        "start_date": report.start_date,
        "end_date": report.end_date,
        "destination": report.destination,
        "purpose": report.purpose,
        "status": report.status,
        "client": report.client,
        "notes": report.notes,
        "advance": to_decimal(report.advance),
        "version": report.version,
        "total_amount": balance.total_spent,
        "expense_count": count,
        "remainder": balance.remainder,
        "reimbursement_amount": balance.reimbursement_amount,
        "direction": balance.direction.value,
        "created_by_name": report.created_by_name,
        "created_at": report.created_at,
        "updated_at": report.updated_at,
    }


def build_balance(report: Report) -> ReportBalanceOut:
    balance = compute_balance_from_expenses(
        report.advance,
        [e.amount for e in report.expenses],
    )
    return ReportBalanceOut(
        balance=balance,
        reimbursement=format_reimbursement(balance),
        balance_display=format_balance(balance.remainder),
    )


def _map_report(report: Report) -> ReportOut:
    block = build_balance(report)
    fields = _summary_fields(report, block.balance.total_spent, len(report.expenses))

    return ReportOut(
        **fields,
        balance=block.balance,
        reimbursement=block.reimbursement,
        balance_display=block.balance_display,
        expenses=[ExpenseOut.model_validate(e) for e in report.expenses],
    )


# =========================
# CREATE
# =========================
async def create_report(db: AsyncSession, payload: ReportCreate, user: User) -> ReportOut:
    _ensure_valid_advance(payload.advance)

    report = Report(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(report)
    await db.flush()

    await emit_user_activity(
        db,
        user,
        ActivityCode.CREATE_REPORT,
        target_id=report.id,
        target_name=report.title,
    )

    await db.commit()

    logger.info("Report created", extra={"report_id": report.id})
    return _map_report(await load_report(db, report.id))


# =========================
# LIST
# =========================
async def list_reports(
    *,
    db: AsyncSession,
    search: Optional[str],
    status: Optional[ReportStatus],
    date_from: Optional[date],
    date_to: Optional[date],
    page: int,
    page_size: int,
) -> ReportListData:
    totals = (
        select(
            Expense.report_id.label("report_id"),
            func.sum(Expense.amount).label("total_amount"),
            func.count(Expense.id).label("expense_count"),
        )
        .group_by(Expense.report_id)
        .subquery()
    )

    conditions = []
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                Report.title.ilike(pattern),
                Report.destination.ilike(pattern),
                Report.client.ilike(pattern),
            )
        )
    if status:
        conditions.append(Report.status == status)
    if date_from:
        conditions.append(Report.start_date >= date_from)
    if date_to:
        conditions.append(Report.end_date <= date_to)

    total = await db.scalar(
        select(func.count(Report.id)).where(*conditions)
    ) or 0

    stmt = (
        select(Report, totals.c.total_amount, totals.c.expense_count)
        .outerjoin(totals, totals.c.report_id == Report.id)
        .where(*conditions)
        .options(raiseload(Report.expenses))
        .order_by(Report.start_date.desc(), Report.id.desc())
        .limit(page_size)
        .offset((page - 1) * page_size)
    )

    rows = (await db.execute(stmt)).all()

    return ReportListData(
        **page_meta(total, page, page_size),
        items=[
            ReportSummaryOut(**_summary_fields(report, amount, count or 0))
            for report, amount, count in rows
        ],
    )


# =========================
# GET
# =========================
async def get_report(db: AsyncSession, report_id: int) -> ReportOut:
    return _map_report(await load_report(db, report_id))


async def get_report_balance(db: AsyncSession, report_id: int) -> ReportBalanceOut:
    return build_balance(await load_report(db, report_id))


# =========================
# UPDATE
# =========================
async def update_report(
    db: AsyncSession,
    report_id: int,
    payload: ReportUpdate,
    user: User,
) -> ReportOut:
    current = await load_report(db, report_id)

    values = {
        k: v
        for k, v in payload.model_dump(exclude_unset=True, exclude={"version"}).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    changes: list[str] = []

    for field, new in values.items():
        old = getattr(current, field)
        if new != old:
            changes.append(f"{field}: '{old}' → '{new}'")

    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    start = values.get("start_date") or current.start_date
    end = values.get("end_date") or current.end_date
    if end < start:
        raise AppException(
            400,
            "end_date must be on or after start_date",
            ErrorCode.REPORT_DATE_RANGE_INVALID,
            details={"start_date": str(start), "end_date": str(end)},
        )

    if "advance" in values:
        _ensure_valid_advance(values["advance"])

    stmt = (
        update(Report)
        .where(
            Report.id == report_id,
            Report.version == payload.version,
        )
        .values(
            **values,
            version=Report.version + 1,
            updated_by_id=user.id,
        )
        .returning(Report.id)
    )

    if (await db.execute(stmt)).scalar_one_or_none() is None:
        raise AppException.version_conflict("Report", ErrorCode.REPORT_VERSION_CONFLICT)

    await emit_user_activity(
        db,
        user,
        ActivityCode.UPDATE_REPORT,
        target_id=report_id,
        changes=", ".join(changes),
    )

    await db.commit()
    return _map_report(await load_report(db, report_id))


# =========================
# DELETE
# =========================
async def delete_report(db: AsyncSession, report_id: int, user: User) -> None:
    report = await load_report(db, report_id)

    if report.expenses:
        raise AppException(
            400,
            "Report still has expenses; remove them first",
            ErrorCode.REPORT_HAS_EXPENSES,
            details={"expense_count": len(report.expenses)},
        )

    title = report.title
    await db.execute(delete(Report).where(Report.id == report_id))

    await emit_user_activity(
        db,
        user,
        ActivityCode.DELETE_REPORT,
        target_id=report_id,
        target_name=title,
    )

    await db.commit()
    logger.info("Report deleted", extra={"report_id": report_id})


# =========================
# REIMBURSE / REVERSE
# =========================
async def _set_reimbursed(
    db: AsyncSession,
    report_id: int,
    user: User,
    reimbursed: bool,
) -> tuple[int, ReportStatus]:
    # existence check without pulling the expenses
    exists = await db.scalar(select(Report.id).where(Report.id == report_id))
    if not exists:
        raise AppException.not_found("Report", ErrorCode.REPORT_NOT_FOUND)

    result = await db.execute(
        update(Expense)
        .where(
            Expense.report_id == report_id,
            Expense.reimbursable.is_(True),
            Expense.reimbursed.is_(not reimbursed),
        )
        .values(
            reimbursed=reimbursed,
            version=Expense.version + 1,
            updated_by_id=user.id,
        )
        .execution_options(synchronize_session=False)
    )
    count = result.rowcount

    new_status = ReportStatus.reimbursed if reimbursed else ReportStatus.in_progress

    await db.execute(
        update(Report)
        .where(Report.id == report_id)
        .values(
            status=new_status,
            version=Report.version + 1,
            updated_by_id=user.id,
        )
        .execution_options(synchronize_session=False)
    )

    await emit_user_activity(
        db,
        user,
        ActivityCode.REIMBURSE_REPORT if reimbursed else ActivityCode.REVERSE_REIMBURSEMENT,
        target_id=report_id,
        count=count,
    )

    await db.commit()

    logger.info(
        "Report reimbursement flag changed",
        extra={
            "report_id": report_id,
            "reimbursed": reimbursed,
            "expenses": count,
        },
    )
    return count, new_status


async def reimburse_report(db: AsyncSession, report_id: int, user: User) -> ReimbursementResult:
    count, status = await _set_reimbursed(db, report_id, user, reimbursed=True)
    return ReimbursementResult(
        report_id=report_id,
        reimbursed_expenses=count,
        new_status=status,
    )


async def reverse_reimbursement(db: AsyncSession, report_id: int, user: User) -> ReversalResult:
    count, status = await _set_reimbursed(db, report_id, user, reimbursed=False)
    return ReversalResult(
        report_id=report_id,
        reversed_expenses=count,
        new_status=status,
    )
