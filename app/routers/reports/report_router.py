from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.report_status import ReportStatus
from app.schemas.reports.report_schemas import (
    ReportCreate,
    ReportUpdate,
    ReportOut,
    ReportListData,
    ReimbursementResult,
    ReversalResult,
)
from app.schemas.reports.balance_schemas import ReportBalanceOut
from app.services.reports.report_service import (
    create_report,
    list_reports,
    get_report,
    get_report_balance,
    update_report,
    delete_report,
    reimburse_report,
    reverse_reimbursement,
)
from app.utils.pdf_generators.report_pdf import generate_report_pdf
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/reports", tags=["Reports"])
logger = get_logger(__name__)


@router.post(
    "/",
    status_code=201,
    response_model=APIResponse[ReportOut],
)
async def create_report_api(
    payload: ReportCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Create report", extra={"title": payload.title, "actor_id": user.id})

    report = await create_report(db, payload, user)
    return success_response("Report created successfully", report)


@router.get("/", response_model=APIResponse[ReportListData])
async def list_reports_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),

    search: Optional[str] = Query(None),
    status: Optional[ReportStatus] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    logger.info(
        "List reports",
        extra={
            "search": search,
            "status": status.value if status else None,
            "page": page,
        },
    )

    data = await list_reports(
        db=db,
        search=search,
        status=status,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )
    return success_response("Reports fetched successfully", data)


@router.get("/{report_id}", response_model=APIResponse[ReportOut])
async def get_report_api(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    report = await get_report(db, report_id)
    return success_response("Report fetched successfully", report)


@router.get("/{report_id}/balance", response_model=APIResponse[ReportBalanceOut])
async def get_report_balance_api(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    balance = await get_report_balance(db, report_id)
    return success_response("Report balance computed", balance)


@router.patch("/{report_id}", response_model=APIResponse[ReportOut])
async def update_report_api(
    report_id: int,
    payload: ReportUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Update report", extra={"report_id": report_id, "version": payload.version})

    report = await update_report(db, report_id, payload, user)
    return success_response("Report updated successfully", report)


@router.delete("/{report_id}", response_model=APIResponse)
async def delete_report_api(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Delete report", extra={"report_id": report_id})

    await delete_report(db, report_id, user)
    return success_response("Report deleted successfully")


@router.post("/{report_id}/reimburse", response_model=APIResponse[ReimbursementResult])
async def reimburse_report_api(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Reimburse report", extra={"report_id": report_id, "actor_id": user.id})

    result = await reimburse_report(db, report_id, user)
    return success_response("Expenses reimbursed successfully", result)


@router.post("/{report_id}/reverse", response_model=APIResponse[ReversalResult])
async def reverse_reimbursement_api(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Reverse reimbursement", extra={"report_id": report_id, "actor_id": user.id})

    result = await reverse_reimbursement(db, report_id, user)
    return success_response("Reimbursement reversed successfully", result)


@router.get("/{report_id}/pdf")
async def download_report_pdf_api(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Generate report PDF", extra={"report_id": report_id})

    path = await generate_report_pdf(db, report_id)
    return FileResponse(
        path,
        media_type="application/pdf",
        filename=f"RDV_{report_id}.pdf",
    )
