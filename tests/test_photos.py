import pytest
from fastapi import HTTPException

from marcheurs.modules.photos.service import PhotoService


@pytest.fixture
def hike(db):
    return db.add("hikes", title="Tour du lac", date="2099-05-01", status="published")


def image(name="a.jpg"):
    return ("files", (name, b"\xff\xd8jpeg", "image/jpeg"))


def test_uploaded_photo_is_listed_once(client, db, login, hike):
    headers = login()

    report = client.post(f"/api/v1/hikes/{hike['id']}/photos", files=[image()], headers=headers).json()
    gallery = client.get("/api/v1/photos", params={"hike_id": hike["id"]}, headers=headers).json()

    url = report["uploaded"][0]["public_url"]
    assert url.startswith(f"https://project.supabase.co/storage/v1/object/public/photos/{hike['id']}/")
    assert url.endswith(".jpg")
    assert [p["public_url"] for p in gallery].count(url) == 1


def test_batch_keeps_images_only_and_caps_size(client, db, login, hike):
    files = [image(f"{i}.jpg") for i in range(12)] + [("files", ("notes.txt", b"hello", "text/plain"))]

    response = client.post(f"/api/v1/hikes/{hike['id']}/photos", files=files, headers=login())

    report = response.json()
    assert response.status_code == 201
    assert len(report["uploaded"]) == 10
    assert sorted(report["skipped"]) == sorted(["notes.txt", "10.jpg", "11.jpg"])
    assert len(db.rows("photos")) == 10


def test_insert_failure_removes_uploaded_object(db, hike):
    service = PhotoService(db)
    db.fail("photos", "insert")

    with pytest.raises(Exception):
        service.add_photo(hike["id"], "u1", "a.jpg", b"jpeg", "image/jpeg")

    assert db.storage.objects == {}


def test_failed_upload_reported_per_file(client, db, login, hike):
    db.storage.failing_uploads.add("photos")

    report = client.post(f"/api/v1/hikes/{hike['id']}/photos", files=[image("a.jpg"), image("b.jpg")],
                         headers=login()).json()

    assert report["uploaded"] == []
    assert [f["filename"] for f in report["failed"]] == ["a.jpg", "b.jpg"]


def test_gallery_paging(client, db, login, hike):
    for i in range(5):
        db.add("photos", hike_id=hike["id"], storage_path=f"{hike['id']}/{i}.jpg")

    page = client.get("/api/v1/photos", params={"limit": 2, "offset": 2}, headers=login()).json()

    # newest first
    assert [p["storage_path"] for p in page] == [f"{hike['id']}/2.jpg", f"{hike['id']}/1.jpg"]


def test_storage_failure_keeps_row(db, hike):
    photo = db.add("photos", hike_id=hike["id"], storage_path="h/a.jpg")
    db.storage.failing_removals.add("photos")

    with pytest.raises(HTTPException) as exc:
        PhotoService(db).delete_photo(photo["id"])

    assert exc.value.status_code == 500
    assert len(db.rows("photos")) == 1
    assert ("photos", "delete") not in db.calls


def test_moderator_deletes_photo(client, db, login, hike):
    db.storage.objects[("photos", "h/a.jpg")] = b"jpeg"
    photo = db.add("photos", hike_id=hike["id"], storage_path="h/a.jpg")

    response = client.delete(f"/api/v1/photos/{photo['id']}", headers=login(role="editor"))

    assert response.status_code == 204
    assert db.rows("photos") == []
    assert db.storage.objects == {}


def test_walker_cannot_delete_photo(client, db, login, hike):
    photo = db.add("photos", hike_id=hike["id"], storage_path="h/a.jpg")

    assert client.delete(f"/api/v1/photos/{photo['id']}", headers=login()).status_code == 403


def test_moderation_list_names_author_and_hike(client, db, login, hike):
    author = db.add("profiles", first_name="Jean", last_name="Giono", email="jean@example.org")
    db.add("photos", hike_id=hike["id"], user_id=author["id"], storage_path="h/a.jpg")
    db.add("photos", hike_id=hike["id"], user_id="gone", storage_path="h/b.jpg")

    rows = client.get("/api/v1/admin/photos", headers=login(role="admin")).json()

    assert {r["storage_path"]: r["author_name"] for r in rows} == {
        "h/a.jpg": "Jean Giono",
        "h/b.jpg": "Utilisateur inconnu",
    }
    assert {r["hike_title"] for r in rows} == {"Tour du lac"}


@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": -3}, {"limit": 2, "offset": -1}])
def test_gallery_rejects_invalid_paging(client, login, params):
    assert client.get("/api/v1/photos", params=params, headers=login()).status_code == 422
