from io import BytesIO

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from product_management.models import ProductMedia

pytestmark = pytest.mark.django_db

MEDIA_URL = "/products/media/"


def items_media_url(product):
    return f"/products/items/{product.id}/media/"


def image_upload(name="front.png", fmt="PNG", size=(64, 48)):
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=f"image/{fmt.lower()}")


@pytest.fixture
def media(auth_client, product):
    response = auth_client.post(
        items_media_url(product),
        {"file": image_upload(), "tags": ["front", "packshot"]},
        format="multipart",
    )
    assert response.status_code == 201
    return ProductMedia.objects.get(pk=response.data["media_id"])


def test_upload_stores_metadata(media, user, product):
    assert media.product == product
    assert media.uploaded_by == user
    assert media.file_name == "front.png"
    assert media.content_type == "image/png"
    assert media.size > 0
    assert media.tags == ["front", "packshot"]
    assert media.file_url


def test_upload_rejects_non_images(auth_client, product):
    text = SimpleUploadedFile("notes.txt", b"not an image", content_type="text/plain")

    response = auth_client.post(items_media_url(product), {"file": text}, format="multipart")

    assert response.status_code == 400
    assert ProductMedia.objects.count() == 0


def test_upload_requires_authentication(api_client, product):
    response = api_client.post(items_media_url(product), {"file": image_upload()}, format="multipart")

    assert response.status_code == 401


def test_upload_to_unknown_product(auth_client, db):
    response = auth_client.post("/products/items/987654/media/", {"file": image_upload()}, format="multipart")

    assert response.status_code == 404


def test_media_list_is_public(api_client, media, product):
    response = api_client.get(items_media_url(product))

    assert response.status_code == 200
    assert [m["media_id"] for m in response.data] == [media.id]
    assert response.data[0]["tags"] == ["front", "packshot"]


def test_uploader_renames_and_retags(auth_client, media):
    response = auth_client.patch(
        f"{MEDIA_URL}{media.id}/", {"file_name": "box.png", "tags": ["box"]}, format="json"
    )

    assert response.status_code == 200
    assert response.data["file_name"] == "box.png"
    assert response.data["tags"] == ["box"]


def test_other_users_media_is_not_found(client_for, other_user, media):
    client = client_for(other_user)

    assert client.patch(f"{MEDIA_URL}{media.id}/", {"file_name": "x.png"}, format="json").status_code == 404
    assert client.delete(f"{MEDIA_URL}{media.id}/").status_code == 404
    assert client.delete(f"{MEDIA_URL}987654/").status_code == 404
    assert ProductMedia.objects.filter(pk=media.id).exists()


def test_uploader_deletes_media_and_file(auth_client, media):
    storage = media.file.storage
    stored_name = media.file.name
    assert storage.exists(stored_name)

    response = auth_client.delete(f"{MEDIA_URL}{media.id}/")

    assert response.status_code == 204
    assert not ProductMedia.objects.filter(pk=media.id).exists()
    assert not storage.exists(stored_name)
