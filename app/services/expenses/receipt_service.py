from typing import List

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.expenses.expense_models import Expense
from app.models.expenses.receipt_models import Receipt
from app.models.users.user_models import User
from app.schemas.expenses.expense_schemas import ReceiptOut
from app.utils.file_storage import save_upload, remove_file, file_path
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_user_activity
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _ensure_expense(db: AsyncSession, expense_id: int) -> None:
    exists = await db.scalar(select(Expense.id).where(Expense.id == expense_id))
    if not exists:
        raise AppException.not_found("Expense", ErrorCode.EXPENSE_NOT_FOUND)


async def _get_receipt_or_404(db: AsyncSession, receipt_id: int) -> Receipt:
    receipt = await db.get(Receipt, receipt_id)
    if not receipt:
        raise AppException.not_found("Receipt", ErrorCode.RECEIPT_NOT_FOUND)
    return receipt


async def upload_receipt(
    db: AsyncSession,
    expense_id: int,
    upload: UploadFile,
    user: User,
) -> ReceiptOut:
    await _ensure_expense(db, expense_id)

    stored = await save_upload(upload)

    receipt = Receipt(
        expense_id=expense_id,
        stored_name=stored.stored_name,
        original_name=stored.original_name,
        size=stored.size,
        mime_type=stored.mime_type,
        url=stored.url,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(receipt)

    try:
        await db.flush()
        await emit_user_activity(
            db,
            user,
            ActivityCode.UPLOAD_RECEIPT,
            target_name=stored.original_name,
            expense_id=expense_id,
        )
        await db.commit()
    except Exception:
        # keep disk and table in step
        remove_file(stored.stored_name)
        raise

    await db.refresh(receipt)
    return ReceiptOut.model_validate(receipt)


async def list_receipts(db: AsyncSession, expense_id: int) -> List[ReceiptOut]:
    await _ensure_expense(db, expense_id)

    result = await db.execute(
        select(Receipt)
        .where(Receipt.expense_id == expense_id)
        .order_by(Receipt.created_at, Receipt.id)
    )
    return [ReceiptOut.model_validate(r) for r in result.scalars().all()]


async def get_receipt_file(db: AsyncSession, receipt_id: int) -> tuple[str, Receipt]:
    receipt = await _get_receipt_or_404(db, receipt_id)
    return file_path(receipt.stored_name), receipt


async def delete_receipt(db: AsyncSession, receipt_id: int, user: User) -> None:
    receipt = await _get_receipt_or_404(db, receipt_id)

    stored_name = receipt.stored_name
    original_name = receipt.original_name
    expense_id = receipt.expense_id

    await db.delete(receipt)

    await emit_user_activity(
        db,
        user,
        ActivityCode.DELETE_RECEIPT,
        target_name=original_name,
        expense_id=expense_id,
    )
    await db.commit()

    remove_file(stored_name)
    logger.info("Receipt deleted", extra={"receipt_id": receipt_id})
