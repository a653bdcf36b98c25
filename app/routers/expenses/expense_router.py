from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.expenses.expense_schemas import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseOut,
    ExpenseListData,
    ReceiptOut,
)
from app.services.expenses.expense_service import (
    create_expense,
    list_expenses,
    get_expense,
    update_expense,
    delete_expense,
)
from app.services.expenses.receipt_service import upload_receipt, list_receipts
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/expenses", tags=["Expenses"])
logger = get_logger(__name__)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[ExpenseOut],
)
async def create_expense_api(
    payload: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info(
        "Create expense",
        extra={"report_id": payload.report_id, "category_id": payload.category_id},
    )

    expense = await create_expense(db, payload, user)
    return success_response("Expense created successfully", expense)


@router.get("/", response_model=APIResponse[ExpenseListData])
async def list_expenses_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),

    search: Optional[str] = Query(None),
    category_id: Optional[int] = Query(None),
    report_id: Optional[int] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    reimbursed: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    logger.info(
        "List expenses",
        extra={"search": search, "report_id": report_id, "page": page},
    )

    data = await list_expenses(
        db=db,
        search=search,
        category_id=category_id,
        report_id=report_id,
        date_from=date_from,
        date_to=date_to,
        reimbursed=reimbursed,
        page=page,
        page_size=page_size,
    )
    return success_response("Expenses fetched successfully", data)


@router.get("/{expense_id}", response_model=APIResponse[ExpenseOut])
async def get_expense_api(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    expense = await get_expense(db, expense_id)
    return success_response("Expense fetched successfully", expense)


@router.patch("/{expense_id}", response_model=APIResponse[ExpenseOut])
async def update_expense_api(
    expense_id: int,
    payload: ExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Update expense", extra={"expense_id": expense_id, "version": payload.version})

    expense = await update_expense(db, expense_id, payload, user)
    return success_response("Expense updated successfully", expense)


@router.delete("/{expense_id}", response_model=APIResponse)
async def delete_expense_api(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Delete expense", extra={"expense_id": expense_id})

    await delete_expense(db, expense_id, user)
    return success_response("Expense deleted successfully")


# =========================
# RECEIPTS
# =========================
@router.post(
    "/{expense_id}/receipts",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[ReceiptOut],
)
async def upload_receipt_api(
    expense_id: int,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info(
        "Upload receipt",
        extra={"expense_id": expense_id, "original_name": file.filename},
    )

    receipt = await upload_receipt(db, expense_id, file, user)
    return success_response("Receipt uploaded successfully", receipt)


@router.get("/{expense_id}/receipts", response_model=APIResponse[List[ReceiptOut]])
async def list_receipts_api(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    receipts = await list_receipts(db, expense_id)
    return success_response("Receipts fetched successfully", receipts)
