# app/utils/file_storage.py
import os
import uuid
from dataclasses import dataclass

from fastapi import UploadFile

from app.core.config import UPLOAD_DIR, MAX_UPLOAD_SIZE, ALLOWED_UPLOAD_TYPES
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class StoredFile:
    stored_name: str
    original_name: str
    size: int
    mime_type: str

    @property
    def url(self) -> str:
        return f"/uploads/{self.stored_name}"


def file_path(stored_name: str) -> str:
    return os.path.join(UPLOAD_DIR, stored_name)


async def save_upload(upload: UploadFile) -> StoredFile:
    mime_type = (upload.content_type or "").lower()
    if mime_type not in ALLOWED_UPLOAD_TYPES:
        raise AppException(
            400,
            "File type not allowed",
            ErrorCode.RECEIPT_TYPE_NOT_ALLOWED,
            details={"mime_type": mime_type, "allowed": sorted(ALLOWED_UPLOAD_TYPES)},
        )

    # one byte past the limit is enough to tell it is too large
    content = await upload.read(MAX_UPLOAD_SIZE + 1)

    if not content:
        raise AppException(400, "Uploaded file is empty", ErrorCode.RECEIPT_EMPTY)

    if len(content) > MAX_UPLOAD_SIZE:
        raise AppException(
            400,
            "File exceeds the maximum allowed size",
            ErrorCode.RECEIPT_TOO_LARGE,
            details={"max_size": MAX_UPLOAD_SIZE},
        )

    stored_name = f"{uuid.uuid4().hex}{ALLOWED_UPLOAD_TYPES[mime_type]}"

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    with open(file_path(stored_name), "wb") as fh:
        fh.write(content)

    logger.info(
        "File stored",
        extra={"stored_name": stored_name, "size": len(content), "mime_type": mime_type},
    )

    return StoredFile(
        stored_name=stored_name,
        original_name=upload.filename or stored_name,
        size=len(content),
        mime_type=mime_type,
    )


def remove_file(stored_name: str) -> None:
    path = file_path(stored_name)
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning("Stored file already missing", extra={"stored_name": stored_name})
