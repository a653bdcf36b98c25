import os

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.services.expenses.receipt_service import get_receipt_file, delete_receipt
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/receipts", tags=["Receipts"])
logger = get_logger(__name__)


@router.get("/{receipt_id}/download")
async def download_receipt_api(
    receipt_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    path, receipt = await get_receipt_file(db, receipt_id)

    if not os.path.exists(path):
        logger.warning("Receipt file missing on disk", extra={"receipt_id": receipt_id})
        raise AppException(404, "Receipt file not found", ErrorCode.RECEIPT_NOT_FOUND)

    return FileResponse(
        path,
        media_type=receipt.mime_type,
        filename=receipt.original_name,
    )


@router.delete("/{receipt_id}", response_model=APIResponse)
async def delete_receipt_api(
    receipt_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Delete receipt", extra={"receipt_id": receipt_id})

    await delete_receipt(db, receipt_id, user)
    return success_response("Receipt deleted successfully")
