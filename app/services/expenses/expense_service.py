from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_

from app.core.config import MILEAGE_CATEGORY_NAME
from app.models.expenses.expense_models import Expense, MileageExpense
from app.models.masters.category_models import Category
from app.models.masters.vehicle_models import Vehicle
from app.models.reports.report_models import Report
from app.models.users.user_models import User
from app.schemas.expenses.expense_schemas import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseOut,
    ExpenseListData,
    MILEAGE_FIELDS,
)
from app.services.masters.vehicle_service import get_vehicle_or_404
from app.utils.file_storage import remove_file
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_user_activity
from app.utils.response import page_meta
from app.utils.logger import get_logger

logger = get_logger(__name__)

EXPENSE_FIELDS = (
    "category_id",
    "expense_date",
    "description",
    "supplier",
    "amount",
    "notes",
    "reimbursable",
    "reimbursed",
    "bill_client",
)
NULLABLE_FIELDS = {"supplier", "notes"}


# =========================
# HELPERS
# =========================
def is_mileage_category(category: Category) -> bool:
    return category.name.strip().lower() == MILEAGE_CATEGORY_NAME.lower()


async def load_expense(db: AsyncSession, expense_id: int) -> Expense:
    stmt = (
        select(Expense)
        .where(Expense.id == expense_id)
        .execution_options(populate_existing=True)
    )
    expense = await db.scalar(stmt)
    if not expense:
        raise AppException.not_found("Expense", ErrorCode.EXPENSE_NOT_FOUND)
    return expense


async def _get_category_or_404(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise AppException.not_found("Category", ErrorCode.CATEGORY_NOT_FOUND)
    return category


def _require_mileage_fields(data: dict) -> None:
    missing = [f for f in MILEAGE_FIELDS if data.get(f) in (None, "")]
    if missing:
        raise AppException(
            400,
            "Vehicle, distance, origin and destination are required for mileage expenses",
            ErrorCode.EXPENSE_MILEAGE_FIELDS_REQUIRED,
            details={"missing": missing},
        )


async def _active_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await get_vehicle_or_404(db, vehicle_id)
    if not vehicle.is_active:
        raise AppException(
            400,
            "Vehicle is inactive",
            ErrorCode.VEHICLE_INACTIVE,
            details={"vehicle_id": vehicle_id},
        )
    return vehicle


# =========================
# CREATE
# =========================
async def create_expense(db: AsyncSession, payload: ExpenseCreate, user: User) -> ExpenseOut:
    report_exists = await db.scalar(select(Report.id).where(Report.id == payload.report_id))
    if not report_exists:
        raise AppException.not_found("Report", ErrorCode.REPORT_NOT_FOUND)

    category = await _get_category_or_404(db, payload.category_id)
    data = payload.model_dump()

    vehicle = None
    if is_mileage_category(category):
        _require_mileage_fields(data)
        vehicle = await _active_vehicle(db, payload.vehicle_id)

    expense = Expense(
        report_id=payload.report_id,
        **{f: data[f] for f in EXPENSE_FIELDS},
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(expense)
    await db.flush()

    if vehicle is not None:
        db.add(
            MileageExpense(
                expense_id=expense.id,
                vehicle_id=vehicle.id,
                origin=payload.origin,
                destination=payload.destination,
                distance_km=payload.distance_km,
                rate_per_km=vehicle.rate_per_km,
            )
        )

    await emit_user_activity(
        db,
        user,
        ActivityCode.CREATE_EXPENSE,
        target_id=expense.id,
        amount=f"{payload.amount:.2f}",
        report_id=payload.report_id,
    )

    await db.commit()

    logger.info(
        "Expense created",
        extra={
            "expense_id": expense.id,
            "report_id": payload.report_id,
            "mileage": vehicle is not None,
        },
    )
    return ExpenseOut.model_validate(await load_expense(db, expense.id))


# =========================
# LIST / GET
# =========================
async def list_expenses(
    *,
    db: AsyncSession,
    search: Optional[str],
    category_id: Optional[int],
    report_id: Optional[int],
    date_from: Optional[date],
    date_to: Optional[date],
    reimbursed: Optional[bool],
    page: int,
    page_size: int,
) -> ExpenseListData:
    stmt = select(Expense)

    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Expense.description.ilike(pattern),
                Expense.supplier.ilike(pattern),
            )
        )
    if category_id:
        stmt = stmt.where(Expense.category_id == category_id)
    if report_id:
        stmt = stmt.where(Expense.report_id == report_id)
    if date_from:
        stmt = stmt.where(Expense.expense_date >= date_from)
    if date_to:
        stmt = stmt.where(Expense.expense_date <= date_to)
    if reimbursed is not None:
        stmt = stmt.where(Expense.reimbursed.is_(reimbursed))

    total = await db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    stmt = (
        stmt.order_by(Expense.expense_date.desc(), Expense.id.desc())
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    expenses = (await db.execute(stmt)).scalars().all()

    return ExpenseListData(
        **page_meta(total, page, page_size),
        items=[ExpenseOut.model_validate(e) for e in expenses],
    )


async def get_expense(db: AsyncSession, expense_id: int) -> ExpenseOut:
    return ExpenseOut.model_validate(await load_expense(db, expense_id))


# =========================
# UPDATE
# =========================
async def update_expense(
    db: AsyncSession,
    expense_id: int,
    payload: ExpenseUpdate,
    user: User,
) -> ExpenseOut:
    current = await load_expense(db, expense_id)
    data = payload.model_dump(exclude_unset=True, exclude={"version"})

    values = {
        f: data[f]
        for f in EXPENSE_FIELDS
        if f in data and (data[f] is not None or f in NULLABLE_FIELDS)
    }
    mileage_input = {f: data[f] for f in MILEAGE_FIELDS if data.get(f) is not None}

    changes: list[str] = []
    for field, new in values.items():
        old = getattr(current, field)
        if new != old:
            changes.append(f"{field}: '{old}' → '{new}'")

    category = current.category
    if "category_id" in values and values["category_id"] != current.category_id:
        category = await _get_category_or_404(db, values["category_id"])

    mileage = current.mileage
    vehicle = None
    merged: dict = {}

    if is_mileage_category(category):
        if mileage_input or mileage is None:
            # partial edits fall back to the stored trip
            merged = {
                f: mileage_input.get(f, getattr(mileage, f) if mileage else None)
                for f in MILEAGE_FIELDS
            }
            _require_mileage_fields(merged)
            vehicle = await _active_vehicle(db, merged["vehicle_id"])
            changes.append("mileage updated" if mileage else "mileage added")
    elif mileage is not None:
        changes.append("mileage removed")

    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    stmt = (
        update(Expense)
        .where(
            Expense.id == expense_id,
            Expense.version == payload.version,
        )
        .values(
            **values,
            version=Expense.version + 1,
            updated_by_id=user.id,
        )
        .returning(Expense.id)
    )

    if (await db.execute(stmt)).scalar_one_or_none() is None:
        raise AppException.version_conflict("Expense", ErrorCode.EXPENSE_VERSION_CONFLICT)

    if vehicle is not None:
        if mileage is None:
            db.add(
                MileageExpense(
                    expense_id=expense_id,
                    vehicle_id=vehicle.id,
                    origin=merged["origin"],
                    destination=merged["destination"],
                    distance_km=merged["distance_km"],
                    rate_per_km=vehicle.rate_per_km,
                )
            )
        else:
            mileage.vehicle = vehicle
            mileage.origin = merged["origin"]
            mileage.destination = merged["destination"]
            mileage.distance_km = merged["distance_km"]
            # re-snapshot at the vehicle's current rate
            mileage.rate_per_km = vehicle.rate_per_km
    elif mileage is not None and not is_mileage_category(category):
        await db.delete(mileage)

    await emit_user_activity(
        db,
        user,
        ActivityCode.UPDATE_EXPENSE,
        target_id=expense_id,
        changes=", ".join(changes),
    )

    await db.commit()
    return ExpenseOut.model_validate(await load_expense(db, expense_id))


# =========================
# DELETE
# =========================
async def delete_expense(db: AsyncSession, expense_id: int, user: User) -> None:
    expense = await load_expense(db, expense_id)

    report_id = expense.report_id
    stored_names = [r.stored_name for r in expense.receipts]

    # mileage and receipt rows go with it (delete-orphan cascade)
    await db.delete(expense)

    await emit_user_activity(
        db,
        user,
        ActivityCode.DELETE_EXPENSE,
        target_id=expense_id,
        report_id=report_id,
    )

    await db.commit()

    for name in stored_names:
        remove_file(name)

    logger.info(
        "Expense deleted",
        extra={"expense_id": expense_id, "receipts_removed": len(stored_names)},
    )
