# tests/test_categories.py
from app.core.dependencies import get_object_store
from app.core.errors import StorageError
from app.main import app
from app.models.category import Category
from app.services.storage import LocalObjectStore
from tests.factories import mpo_bytes, noisy_png_bytes, png_bytes


def _create(client, headers, files=None, **fields):
    return client.post("/api/categories", data=fields, files=files, headers=headers)


def test_category_lifecycle(client, auth_headers):
    resp = _create(client, auth_headers, name="Tools")
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Category created successfully"
    assert body["data"]["name"] == "Tools"
    assert body["data"]["image"] is None
    assert "image_url" not in body["data"]
    category_id = body["data"]["id"]

    resp = client.get(f"/api/categories/{category_id}")
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Tools"

    resp = client.delete(f"/api/categories/{category_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Category deleted successfully"}

    resp = client.get(f"/api/categories/{category_id}")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Category not found"}


def test_writes_require_authentication(client):
    assert client.post("/api/categories", data={"name": "Tools"}).status_code == 401
    assert client.put("/api/categories/1", data={"name": "Tools"}).status_code == 401
    assert client.delete("/api/categories/1").status_code == 401


def test_list_is_public_and_in_insertion_order(client, auth_headers):
    for name in ("Zeta", "Alpha", "Mid"):
        assert _create(client, auth_headers, name=name).status_code == 201
    resp = client.get("/api/categories")
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()["data"]] == ["Zeta", "Alpha", "Mid"]


def test_create_accepts_json(client, auth_headers):
    resp = client.post(
        "/api/categories",
        json={"name": "Garden", "description": "Outdoor"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["description"] == "Outdoor"


def test_create_with_image_stores_file_and_exposes_url(client, auth_headers, store, png):
    resp = _create(client, auth_headers, name="Paint", files={"image": ("swatch.png", png, "image/png")})
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["image"].startswith("categories/")
    assert data["image"].endswith(".png")
    assert data["image_url"] == f"http://testserver/storage/{data['image']}"
    assert store.exists(data["image"])


def test_duplicate_name_is_rejected(client, auth_headers):
    assert _create(client, auth_headers, name="Tools").status_code == 201
    resp = _create(client, auth_headers, name="Tools")
    assert resp.status_code == 422
    body = resp.json()
    assert body["message"] == "Validation failed"
    assert body["errors"] == {"name": ["The name has already been taken."]}

    # case-sensitive
    assert _create(client, auth_headers, name="tools").status_code == 201


def test_create_validation(client, auth_headers, store):
    resp = _create(
        client,
        auth_headers,
        name="x" * 256,
        files={"image": ("notes.png", b"plain text", "image/png")},
    )
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert errors["name"] == ["The name field must not be greater than 255 characters."]
    assert "The image field must be an image." in errors["image"]
    assert not (store.root / "categories").exists()

    resp = _create(client, auth_headers)
    assert resp.json()["errors"] == {"name": ["The name field is required."]}


def test_rejects_unsupported_image_type_and_large_image(client, auth_headers):
    bmp = png_bytes(fmt="BMP")
    resp = _create(client, auth_headers, name="A", files={"image": ("a.bmp", bmp, "image/bmp")})
    assert resp.status_code == 422
    assert resp.json()["errors"]["image"] == [
        "The image field must be a file of type: jpeg, jpg, png, gif, webp."
    ]

    big = noisy_png_bytes()
    assert len(big) > 2048 * 1024
    resp = _create(client, auth_headers, name="B", files={"image": ("big.png", big, "image/png")})
    assert resp.status_code == 422
    assert resp.json()["errors"]["image"] == ["The image field must not be greater than 2048 kilobytes."]


def test_update_is_partial(client, auth_headers):
    category_id = _create(client, auth_headers, name="Tools", description="Hand tools").json()["data"]["id"]

    resp = client.patch(f"/api/categories/{category_id}", data={"name": "Power Tools"}, headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Power Tools"
    assert data["description"] == "Hand tools"

    # sent but empty clears a nullable field
    resp = client.patch(f"/api/categories/{category_id}", data={"description": ""}, headers=auth_headers)
    assert resp.json()["data"]["description"] is None
    assert resp.json()["data"]["name"] == "Power Tools"

    # sent but empty fails a required field
    resp = client.put(f"/api/categories/{category_id}", data={"name": ""}, headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"name": ["The name field is required."]}


def test_update_may_keep_own_name(client, auth_headers):
    category_id = _create(client, auth_headers, name="Tools").json()["data"]["id"]
    _create(client, auth_headers, name="Paint")

    resp = client.put(f"/api/categories/{category_id}", data={"name": "Tools"}, headers=auth_headers)
    assert resp.status_code == 200

    resp = client.put(f"/api/categories/{category_id}", data={"name": "Paint"}, headers=auth_headers)
    assert resp.status_code == 422


def test_update_missing_category(client, auth_headers):
    resp = client.put("/api/categories/404", data={"name": "X"}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Category not found"


def test_update_replaces_image(client, auth_headers, store, png):
    created = _create(client, auth_headers, name="Paint", files={"image": ("a.png", png, "image/png")})
    category_id = created.json()["data"]["id"]
    old_path = created.json()["data"]["image"]

    gif = png_bytes(fmt="GIF")
    resp = client.put(
        f"/api/categories/{category_id}",
        files={"image": ("b.gif", gif, "image/gif")},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    new_path = resp.json()["data"]["image"]
    assert new_path != old_path
    assert new_path.endswith(".gif")
    assert not store.exists(old_path)
    assert store.exists(new_path)


def test_method_override_updates(client, auth_headers):
    category_id = _create(client, auth_headers, name="Tools").json()["data"]["id"]

    resp = client.post(
        f"/api/categories/{category_id}",
        data={"_method": "PUT", "name": "Renamed"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Renamed"

    resp = client.post(f"/api/categories/{category_id}", data={"name": "Nope"}, headers=auth_headers)
    assert resp.status_code == 405


class FailingPutStore(LocalObjectStore):
    def put(self, prefix, upload, extension=None):
        raise StorageError("disk full")


class FailingDeleteStore(LocalObjectStore):
    def delete(self, path):
        raise StorageError("permission denied")


def test_upload_failure_on_create_leaves_no_record(client, auth_headers, store, png, db):
    app.dependency_overrides[get_object_store] = lambda: FailingPutStore(str(store.root), store.public_url)

    resp = _create(client, auth_headers, name="Paint", files={"image": ("a.png", png, "image/png")})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Failed to upload image"}
    assert db.query(Category).count() == 0


def test_upload_failure_on_update_keeps_old_path(client, auth_headers, store, png, db):
    created = _create(client, auth_headers, name="Paint", files={"image": ("a.png", png, "image/png")})
    category_id = created.json()["data"]["id"]
    old_path = created.json()["data"]["image"]

    app.dependency_overrides[get_object_store] = lambda: FailingPutStore(str(store.root), store.public_url)
    resp = client.put(
        f"/api/categories/{category_id}",
        data={"name": "Renamed"},
        files={"image": ("b.png", png, "image/png")},
        headers=auth_headers,
    )
    assert resp.status_code == 500

    # the old file is already gone, the record is untouched
    assert not store.exists(old_path)
    category = db.get(Category, category_id)
    assert category.image == old_path
    assert category.name == "Paint"


def test_delete_succeeds_when_file_cleanup_fails(client, auth_headers, store, png, db):
    created = _create(client, auth_headers, name="Paint", files={"image": ("a.png", png, "image/png")})
    category_id = created.json()["data"]["id"]
    path = created.json()["data"]["image"]

    app.dependency_overrides[get_object_store] = lambda: FailingDeleteStore(str(store.root), store.public_url)
    resp = client.delete(f"/api/categories/{category_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert db.get(Category, category_id) is None
    assert store.exists(path)


def test_delete_removes_image(client, auth_headers, store, png):
    created = _create(client, auth_headers, name="Paint", files={"image": ("a.png", png, "image/png")})
    path = created.json()["data"]["image"]
    client.delete(f"/api/categories/{created.json()['data']['id']}", headers=auth_headers)
    assert not store.exists(path)


def test_delete_missing_category(client, auth_headers):
    assert client.delete("/api/categories/999", headers=auth_headers).status_code == 404


def test_phone_camera_jpeg_is_accepted(client, auth_headers, store):
    resp = _create(client, auth_headers, name="Photos", files={"image": ("photo.jpg", mpo_bytes(), "image/jpeg")})
    assert resp.status_code == 201
    path = resp.json()["data"]["image"]
    assert path.startswith("categories/") and path.endswith(".jpg")
    assert store.exists(path)


def test_ids_beyond_integer_range_are_not_found(client, auth_headers):
    huge = 10**23
    resp = client.get(f"/api/categories/{huge}")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Category not found"}
    assert client.put(f"/api/categories/{huge}", data={"name": "X"}, headers=auth_headers).status_code == 404
    assert client.delete(f"/api/categories/{huge}", headers=auth_headers).status_code == 404
