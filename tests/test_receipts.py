import asyncio
import os

import pytest

from app.constants.error_codes import ErrorCode
from app.core.exceptions import AppException
from app.utils import file_storage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def expense(api, headers):
    report = api.report(headers)
    category = api.category(headers)
    return api.expense(headers, report["id"], category["id"])


def _upload(client, headers, expense_id, name="nota.png", content=PNG_BYTES, mime="image/png"):
    return client.post(
        f"/expenses/{expense_id}/receipts",
        files={"file": (name, content, mime)},
        headers=headers,
    )


def test_upload_and_download_receipt(client, headers, expense):
    res = _upload(client, headers, expense["id"])

    assert res.status_code == 201
    receipt = res.json()["data"]
    assert receipt["original_name"] == "nota.png"
    assert receipt["mime_type"] == "image/png"
    assert receipt["size"] == len(PNG_BYTES)
    assert receipt["stored_name"].endswith(".png")
    assert receipt["url"] == f"/uploads/{receipt['stored_name']}"
    assert os.path.exists(file_storage.file_path(receipt["stored_name"]))

    listed = client.get(f"/expenses/{expense['id']}/receipts", headers=headers).json()["data"]
    assert [r["id"] for r in listed] == [receipt["id"]]

    download = client.get(f"/receipts/{receipt['id']}/download", headers=headers)
    assert download.status_code == 200
    assert download.content == PNG_BYTES

    static = client.get(receipt["url"])
    assert static.status_code == 200


def test_upload_rejects_unsupported_type(client, headers, expense):
    res = _upload(client, headers, expense["id"], name="notes.txt", content=b"hello", mime="text/plain")

    assert res.status_code == 400
    body = res.json()
    assert body["error_code"] == "RECEIPT_TYPE_NOT_ALLOWED"
    assert body["details"]["mime_type"] == "text/plain"


def test_upload_rejects_empty_file(client, headers, expense):
    res = _upload(client, headers, expense["id"], content=b"")

    assert res.status_code == 400
    assert res.json()["error_code"] == "RECEIPT_EMPTY"


def test_upload_rejects_large_file(client, headers, expense, monkeypatch):
    monkeypatch.setattr(file_storage, "MAX_UPLOAD_SIZE", 16)

    res = _upload(client, headers, expense["id"])

    assert res.status_code == 400
    body = res.json()
    assert body["error_code"] == "RECEIPT_TOO_LARGE"
    assert body["details"] == {"max_size": 16}


def test_upload_to_missing_expense(client, headers):
    res = _upload(client, headers, 4242)

    assert res.status_code == 404
    assert res.json()["error_code"] == "EXPENSE_NOT_FOUND"


def test_delete_receipt_removes_file(client, headers, expense):
    receipt = _upload(client, headers, expense["id"]).json()["data"]
    path = file_storage.file_path(receipt["stored_name"])

    res = client.delete(f"/receipts/{receipt['id']}", headers=headers)

    assert res.status_code == 200
    assert not os.path.exists(path)
    assert client.get(f"/receipts/{receipt['id']}/download", headers=headers).status_code == 404


def test_deleting_expense_removes_receipt_files(client, headers, expense):
    receipt = _upload(client, headers, expense["id"], name="recibo.pdf", mime="application/pdf").json()["data"]
    path = file_storage.file_path(receipt["stored_name"])
    assert os.path.exists(path)

    res = client.delete(f"/expenses/{expense['id']}", headers=headers)

    assert res.status_code == 200
    assert not os.path.exists(path)


def test_stored_extension_follows_declared_type(client, headers, expense):
    res = _upload(
        client,
        headers,
        expense["id"],
        name="evil.html",
        content=b"<script>alert(1)</script>",
        mime="image/png",
    )

    assert res.status_code == 201
    receipt = res.json()["data"]
    assert receipt["original_name"] == "evil.html"
    assert receipt["stored_name"].endswith(".png")

    static = client.get(receipt["url"])
    assert static.status_code == 200
    assert static.headers["content-type"] == "image/png"


def test_filename_without_extension_gets_one_from_type(client, headers, expense):
    res = _upload(client, headers, expense["id"], name="scan", mime="application/pdf")

    assert res.status_code == 201
    assert res.json()["data"]["stored_name"].endswith(".pdf")


class _CountingUpload:
    filename = "big.png"
    content_type = "image/png"

    def __init__(self, content: bytes):
        self.content = content
        self.requested = []

    async def read(self, size: int = -1) -> bytes:
        self.requested.append(size)
        return self.content if size < 0 else self.content[:size]


def test_oversized_upload_is_not_read_in_full(monkeypatch):
    monkeypatch.setattr(file_storage, "MAX_UPLOAD_SIZE", 16)
    upload = _CountingUpload(b"x" * 4096)

    with pytest.raises(AppException) as exc:
        asyncio.run(file_storage.save_upload(upload))

    assert exc.value.error_code == ErrorCode.RECEIPT_TOO_LARGE
    assert upload.requested == [17]
