import pytest
from httpx import AsyncClient

from freedom_wall.config import settings
from freedom_wall.services.storage_service import StorageService

API = "/api/v1/storage"
BUCKET = "freedom-wall-images"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

def test_object_name_keeps_extension():
    first = StorageService.generate_object_name("holiday.PNG")
    second = StorageService.generate_object_name("holiday.PNG")

    assert first.endswith(".png")
    assert first != second

@pytest.mark.asyncio
async def test_upload_and_resolve_public_url(test_client: AsyncClient):
    upload = await test_client.post(
        f"{API}/{BUCKET}",
        files={"file": ("photo.png", PNG_BYTES, "image/png")}
    )

    assert upload.status_code == 200
    name = upload.json()["name"]
    assert name.endswith(".png")

    resolved = await test_client.get(f"{API}/{BUCKET}/{name}/public-url")

    assert resolved.status_code == 200
    public_url = resolved.json()["public_url"]
    assert public_url == f"{settings.PUBLIC_BASE_URL}/storage/{BUCKET}/{name}"

    served = await test_client.get(f"/storage/{BUCKET}/{name}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES

@pytest.mark.asyncio
async def test_upload_rejects_other_image_types(test_client: AsyncClient):
    response = await test_client.post(
        f"{API}/{BUCKET}",
        files={"file": ("anim.gif", b"GIF89a", "image/gif")}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Please select a valid image file (JPEG or PNG)"

@pytest.mark.asyncio
async def test_unknown_bucket(test_client: AsyncClient):
    upload = await test_client.post(
        f"{API}/other-bucket",
        files={"file": ("photo.png", PNG_BYTES, "image/png")}
    )
    resolved = await test_client.get(f"{API}/other-bucket/x.png/public-url")

    assert upload.status_code == 404
    assert resolved.status_code == 404

@pytest.mark.asyncio
async def test_public_url_for_missing_object(test_client: AsyncClient):
    response = await test_client.get(f"{API}/{BUCKET}/does-not-exist.png/public-url")

    assert response.status_code == 404
