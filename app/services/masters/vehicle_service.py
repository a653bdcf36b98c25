from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, or_, cast, String
from sqlalchemy.exc import IntegrityError

from app.models.masters.vehicle_models import Vehicle
from app.models.expenses.expense_models import MileageExpense
from app.models.enums.vehicle_enums import VehicleType
from app.models.users.user_models import User
from app.schemas.masters.vehicle_schemas import (
    VehicleCreate,
    VehicleUpdate,
    VehicleOut,
    VehicleListData,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_user_activity
from app.utils.response import page_meta
from app.utils.logger import get_logger

logger = get_logger(__name__)


def vehicle_label(vehicle: Vehicle) -> str:
    parts = [p for p in (vehicle.brand, vehicle.model) if p]
    parts.append(f"[{vehicle.identification}]")
    return " ".join(parts)


async def get_vehicle_or_404(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise AppException.not_found("Vehicle", ErrorCode.VEHICLE_NOT_FOUND)
    return vehicle


async def _identification_taken(
    db: AsyncSession,
    identification: str,
    exclude_id: Optional[int] = None,
) -> bool:
    stmt = select(Vehicle.id).where(Vehicle.identification == identification)
    if exclude_id is not None:
        stmt = stmt.where(Vehicle.id != exclude_id)
    return bool(await db.scalar(stmt))


# =========================
# CREATE
# =========================
async def create_vehicle(db: AsyncSession, payload: VehicleCreate, user: User) -> VehicleOut:
    if await _identification_taken(db, payload.identification):
        raise AppException(
            400,
            "A vehicle with this identification already exists",
            ErrorCode.VEHICLE_IDENTIFICATION_EXISTS,
        )

    vehicle = Vehicle(**payload.model_dump())
    db.add(vehicle)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise AppException(
            400,
            "A vehicle with this identification already exists",
            ErrorCode.VEHICLE_IDENTIFICATION_EXISTS,
        )

    await emit_user_activity(
        db,
        user,
        ActivityCode.CREATE_VEHICLE,
        target_name=vehicle_label(vehicle),
        rate_per_km=f"{vehicle.rate_per_km:.2f}",
    )

    await db.commit()
    await db.refresh(vehicle)

    logger.info("Vehicle created", extra={"vehicle_id": vehicle.id})
    return VehicleOut.model_validate(vehicle)


# =========================
# LIST / GET
# =========================
async def list_vehicles(
    *,
    db: AsyncSession,
    search: Optional[str],
    vehicle_type: Optional[VehicleType],
    is_active: Optional[bool],
    include_inactive: bool,
    page: int,
    page_size: int,
) -> VehicleListData:
    stmt = select(Vehicle)

    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                cast(Vehicle.type, String).ilike(pattern),
                Vehicle.brand.ilike(pattern),
                Vehicle.model.ilike(pattern),
                Vehicle.identification.ilike(pattern),
            )
        )

    if vehicle_type:
        stmt = stmt.where(Vehicle.type == vehicle_type)

    if is_active is not None:
        stmt = stmt.where(Vehicle.is_active.is_(is_active))
    elif not include_inactive:
        stmt = stmt.where(Vehicle.is_active.is_(True))

    total = await db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    stmt = (
        stmt.order_by(
            Vehicle.is_active.desc(),
            Vehicle.type,
            Vehicle.brand,
            Vehicle.model,
            Vehicle.id,
        )
        .limit(page_size)
        .offset((page - 1) * page_size)
    )

    vehicles = (await db.execute(stmt)).scalars().all()

    return VehicleListData(
        **page_meta(total, page, page_size),
        items=[VehicleOut.model_validate(v) for v in vehicles],
    )


async def get_vehicle(db: AsyncSession, vehicle_id: int) -> VehicleOut:
    return VehicleOut.model_validate(await get_vehicle_or_404(db, vehicle_id))


# =========================
# UPDATE
# =========================
async def update_vehicle(
    db: AsyncSession,
    vehicle_id: int,
    payload: VehicleUpdate,
    user: User,
) -> VehicleOut:
    current = await get_vehicle_or_404(db, vehicle_id)

    values = payload.model_dump(exclude_unset=True, exclude={"version"})
    changes: list[str] = []

    for field, new in values.items():
        old = getattr(current, field)
        if new != old:
            changes.append(f"{field}: '{old}' → '{new}'")

    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    if "identification" in values and values["identification"] != current.identification:
        if await _identification_taken(db, values["identification"], exclude_id=vehicle_id):
            raise AppException(
                400,
                "A vehicle with this identification already exists",
                ErrorCode.VEHICLE_IDENTIFICATION_EXISTS,
            )

    label = vehicle_label(current)

    stmt = (
        update(Vehicle)
        .where(
            Vehicle.id == vehicle_id,
            Vehicle.version == payload.version,
        )
        .values(**values, version=Vehicle.version + 1)
        .returning(Vehicle)
    )

    vehicle = (await db.execute(stmt)).scalar_one_or_none()
    if not vehicle:
        raise AppException.version_conflict("Vehicle", ErrorCode.VEHICLE_VERSION_CONFLICT)

    await emit_user_activity(
        db,
        user,
        ActivityCode.UPDATE_VEHICLE,
        target_name=label,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(vehicle)
    return VehicleOut.model_validate(vehicle)


# =========================
# DELETE
# =========================
async def delete_vehicle(db: AsyncSession, vehicle_id: int, user: User) -> Optional[VehicleOut]:
    """
    Vehicles referenced by mileage expenses are only deactivated so the
    history keeps pointing at them. Returns the deactivated vehicle, or
    None when the row was removed.
    """
    vehicle = await get_vehicle_or_404(db, vehicle_id)
    label = vehicle_label(vehicle)

    trips = await db.scalar(
        select(func.count(MileageExpense.id)).where(MileageExpense.vehicle_id == vehicle_id)
    )

    if trips:
        stmt = (
            update(Vehicle)
            .where(Vehicle.id == vehicle_id)
            .values(is_active=False, version=Vehicle.version + 1)
            .returning(Vehicle)
        )
        vehicle = (await db.execute(stmt)).scalar_one()

        await emit_user_activity(
            db,
            user,
            ActivityCode.DEACTIVATE_VEHICLE,
            target_name=label,
        )
        await db.commit()
        await db.refresh(vehicle)

        logger.info(
            "Vehicle deactivated instead of deleted",
            extra={"vehicle_id": vehicle_id, "trips": trips},
        )
        return VehicleOut.model_validate(vehicle)

    await db.execute(delete(Vehicle).where(Vehicle.id == vehicle_id))

    await emit_user_activity(
        db,
        user,
        ActivityCode.DELETE_VEHICLE,
        target_name=label,
    )
    await db.commit()

    logger.info("Vehicle deleted", extra={"vehicle_id": vehicle_id})
    return None
