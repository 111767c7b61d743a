"""Tests for the upload pipeline."""

import asyncio
import json

import pytest

from component_library.core import MEGABYTE
from component_library.models import ErrorKind
from component_library.upload import (
    MULTIPLE_FILES_MESSAGE,
    SUCCESS_MESSAGE,
    ComponentUploader,
    UploadedFile,
)


class SlowFile(UploadedFile):
    """File whose content arrives after a short delay."""

    async def read_bytes(self) -> bytes:
        await asyncio.sleep(0.05)
        return await super().read_bytes()


@pytest.mark.asyncio
async def test_upload_success(uploader, store, custom_alert_json):
    """Test a valid file ends up in the store."""
    outcome = await uploader.upload(UploadedFile.from_bytes("alert.json", custom_alert_json.encode()))

    assert outcome.success
    assert outcome.message == SUCCESS_MESSAGE
    assert outcome.component.id == "custom-alert"
    assert outcome.component.original_filename == "alert.json"
    assert [e.id for e in store.load_all()] == ["custom-alert"]


@pytest.mark.asyncio
async def test_upload_from_path(uploader, tmp_path, button_dict):
    """Test reading content from disk."""
    path = tmp_path / "button.json"
    path.write_text(json.dumps(button_dict), encoding="utf-8")

    outcome = await uploader.upload(UploadedFile.from_path(path))

    assert outcome.success
    assert outcome.component.component.to_json_dict() == button_dict


@pytest.mark.asyncio
async def test_upload_invalid_extension(uploader, store):
    """Test file checks run before reading."""
    outcome = await uploader.upload(UploadedFile.from_bytes("test.txt", b"{}", "text/plain"))

    assert not outcome.success
    assert outcome.error_kind == ErrorKind.INVALID_EXTENSION
    assert outcome.message == "File must have a .json extension"
    assert store.load_all() == []


@pytest.mark.asyncio
async def test_upload_declared_size_too_large(uploader):
    """Test declared size above the limit is rejected."""
    file = UploadedFile(name="big.json", size_bytes=MEGABYTE + 1, content=b"{}")
    outcome = await uploader.upload(file)

    assert outcome.error_kind == ErrorKind.FILE_TOO_LARGE


@pytest.mark.asyncio
async def test_upload_actual_size_too_large(uploader):
    """Test content larger than declared is still capped."""
    file = UploadedFile(name="big.json", size_bytes=10, content=b" " * (MEGABYTE + 1))
    outcome = await uploader.upload(file)

    assert outcome.error_kind == ErrorKind.FILE_TOO_LARGE


@pytest.mark.asyncio
async def test_upload_schema_errors(uploader):
    """Test all validation errors are reported."""
    content = json.dumps({"metadata": {"type": "x-card"}, "ui": {"template": {}}}).encode()
    outcome = await uploader.upload(UploadedFile.from_bytes("card.json", content))

    assert outcome.error_kind == ErrorKind.SCHEMA_VIOLATION
    assert outcome.message == "metadata.name must be a non-empty string"
    assert len(outcome.errors) == 2


@pytest.mark.asyncio
async def test_upload_malformed(uploader):
    """Test malformed JSON."""
    outcome = await uploader.upload(UploadedFile.from_bytes("bad.json", b"{nope"))
    assert outcome.error_kind == ErrorKind.MALFORMED_JSON


@pytest.mark.asyncio
async def test_upload_duplicate(uploader, custom_alert_json):
    """Test store errors are surfaced as outcomes."""
    file = UploadedFile.from_bytes("alert.json", custom_alert_json.encode())
    assert (await uploader.upload(file)).success

    outcome = await uploader.upload(file)
    assert outcome.error_kind == ErrorKind.DUPLICATE_TYPE
    assert outcome.message == "Component with type 'custom-alert' already exists"


@pytest.mark.asyncio
async def test_upload_read_failure(uploader, tmp_path):
    """Test unreadable files."""
    file = UploadedFile(name="gone.json", size_bytes=10, path=tmp_path / "gone.json")
    outcome = await uploader.upload(file)

    assert outcome.error_kind == ErrorKind.READ_FAILED
    assert outcome.message.startswith("Failed to read file")


@pytest.mark.asyncio
async def test_upload_not_utf8(uploader):
    """Test undecodable content."""
    outcome = await uploader.upload(UploadedFile.from_bytes("bin.json", b"\xff\xfe\x00{"))

    assert outcome.error_kind == ErrorKind.READ_FAILED
    assert outcome.message.startswith("Failed to read file")


@pytest.mark.asyncio
async def test_upload_bom(uploader, custom_alert_json):
    """Test a UTF-8 BOM is accepted."""
    content = b"\xef\xbb\xbf" + custom_alert_json.encode()
    assert (await uploader.upload(UploadedFile.from_bytes("alert.json", content))).success


@pytest.mark.asyncio
async def test_upload_warnings_carried(uploader):
    """Test warnings from file and content checks are returned on success."""
    content = json.dumps(
        {"metadata": {"type": "Fancy", "name": "F"}, "ui": {"template": {"tag": "div"}}}
    ).encode()
    outcome = await uploader.upload(UploadedFile.from_bytes("f.json", content, "image/png"))

    assert outcome.success
    assert len(outcome.warnings) == 2


@pytest.mark.asyncio
async def test_upload_many(uploader, custom_alert_json):
    """Test multiple or missing files are rejected."""
    file = UploadedFile.from_bytes("alert.json", custom_alert_json.encode())

    outcome = await uploader.upload_many([file, file])
    assert outcome.message == MULTIPLE_FILES_MESSAGE

    assert not (await uploader.upload_many([])).success
    assert (await uploader.upload_many([file])).success


@pytest.mark.asyncio
async def test_upload_single_flight(store, custom_alert_json, make_component):
    """Test a second upload while one is in flight is rejected."""
    uploader = ComponentUploader(store)
    slow = SlowFile(name="alert.json", size_bytes=100, content=custom_alert_json.encode())
    other = UploadedFile.from_bytes(
        "other.json",
        json.dumps({"metadata": {"type": "other", "name": "O"}, "ui": {"template": {"tag": "p"}}}).encode(),
    )

    first = asyncio.create_task(uploader.upload(slow))
    await asyncio.sleep(0)
    assert uploader.busy

    rejected = await uploader.upload(other)
    assert rejected.error_kind == ErrorKind.CONCURRENT_MUTATION

    assert (await first).success
    assert not uploader.busy
    assert (await uploader.upload(other)).success
