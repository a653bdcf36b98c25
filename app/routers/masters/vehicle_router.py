from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.vehicle_enums import VehicleType
from app.schemas.masters.vehicle_schemas import (
    VehicleCreate,
    VehicleUpdate,
    VehicleOut,
    VehicleListData,
)
from app.services.masters.vehicle_service import (
    create_vehicle,
    list_vehicles,
    get_vehicle,
    update_vehicle,
    delete_vehicle,
)
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[VehicleListData])
async def list_vehicles_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),

    search: Optional[str] = Query(None),
    type: Optional[VehicleType] = Query(None),
    is_active: Optional[bool] = Query(None),
    include_inactive: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    logger.info(
        "List vehicles",
        extra={
            "search": search,
            "vehicle_type": type.value if type else None,
            "include_inactive": include_inactive,
            "page": page,
        },
    )

    data = await list_vehicles(
        db=db,
        search=search,
        vehicle_type=type,
        is_active=is_active,
        include_inactive=include_inactive,
        page=page,
        page_size=page_size,
    )
    return success_response("Vehicles fetched successfully", data)


@router.get("/{vehicle_id}", response_model=APIResponse[VehicleOut])
async def get_vehicle_api(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    vehicle = await get_vehicle(db, vehicle_id)
    return success_response("Vehicle fetched successfully", vehicle)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[VehicleOut],
)
async def create_vehicle_api(
    payload: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info(
        "Create vehicle",
        extra={"identification": payload.identification, "vehicle_type": payload.type.value},
    )

    vehicle = await create_vehicle(db, payload, user)
    return success_response("Vehicle created successfully", vehicle)


@router.patch("/{vehicle_id}", response_model=APIResponse[VehicleOut])
async def update_vehicle_api(
    vehicle_id: int,
    payload: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Update vehicle", extra={"vehicle_id": vehicle_id})

    vehicle = await update_vehicle(db, vehicle_id, payload, user)
    return success_response("Vehicle updated successfully", vehicle)


@router.delete("/{vehicle_id}", response_model=APIResponse[Optional[VehicleOut]])
async def delete_vehicle_api(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Delete vehicle", extra={"vehicle_id": vehicle_id})

    vehicle = await delete_vehicle(db, vehicle_id, user)
    if vehicle is not None:
        return success_response(
            "Vehicle is used by mileage expenses and was deactivated",
            vehicle,
        )
    return success_response("Vehicle deleted successfully")
