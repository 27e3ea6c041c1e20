import io
import os

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from indovendor.core.exceptions import ApiError
from indovendor.services.file_storage_service import (
    DOCUMENT_RULE,
    PRODUCT_IMAGE_RULE,
    FileStorageService,
)


def make_upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename, headers=Headers({"content-type": content_type}))


@pytest.fixture
def storage():
    return FileStorageService()


async def test_save_and_delete(storage, upload_dir):
    url = await storage.save(make_upload(b"png-bytes", "Photo.PNG", "image/png"), "products", "p1_1", PRODUCT_IMAGE_RULE)
    assert url == "/uploads/products/p1_1.png"
    path = upload_dir / "products" / "p1_1.png"
    assert path.read_bytes() == b"png-bytes"

    assert storage.delete(url) is True
    assert not path.exists()
    # Borrar dos veces no es un error
    assert storage.delete(url) is False


async def test_extension_without_filename_suffix(storage):
    url = await storage.save(make_upload(b"%PDF", "license", "application/pdf"), "docs", "license-1", DOCUMENT_RULE)
    assert url.endswith("/license-1.pdf")


async def test_extension_ignores_client_filename(storage, upload_dir):
    url = await storage.save(make_upload(b"png-bytes", "x.html", "image/png"), "products", "p2_1", PRODUCT_IMAGE_RULE)
    assert url == "/uploads/products/p2_1.png"
    assert (upload_dir / "products" / "p2_1.png").exists()
    assert not (upload_dir / "products" / "p2_1.html").exists()


async def test_rejects_wrong_type(storage, upload_dir):
    with pytest.raises(ApiError) as exc:
        await storage.save(make_upload(b"GIF89a", "a.gif", "image/gif"), "products", "x", PRODUCT_IMAGE_RULE)
    assert exc.value.status_code == 400
    assert exc.value.code == "INVALID_FILE_TYPE"
    assert not os.path.exists(upload_dir / "products")


async def test_rejects_oversized_file(storage):
    content = b"\x00" * (PRODUCT_IMAGE_RULE.max_size + 1)
    with pytest.raises(ApiError) as exc:
        await storage.save(make_upload(content, "a.png", "image/png"), "products", "x", PRODUCT_IMAGE_RULE)
    assert exc.value.code == "FILE_TOO_LARGE"
    assert exc.value.detail == "Image file size must not exceed 5MB"


@pytest.mark.parametrize("url", [None, "", "https://cdn.example.com/a.png", "/uploads/../secret.txt"])
def test_path_for_url_ignores_foreign_urls(storage, url):
    assert storage.path_for_url(url) is None
    assert storage.delete(url) is False


def test_path_for_url_maps_into_upload_dir(storage, upload_dir):
    assert storage.path_for_url("/uploads/avatars/u1.png") == os.path.join(str(upload_dir), "avatars", "u1.png")
