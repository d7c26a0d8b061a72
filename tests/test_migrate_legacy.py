import pytest

from marcheurs.scripts.migrate_legacy import IMPORTED_DESCRIPTION, migrate, parse_folder_name


@pytest.mark.parametrize("name, expected", [
    ("2021_04_02_Tour du lac de Bimont", ("2021-04-02", "Tour du lac de Bimont")),
    ("2019-10-13-Sainte_Victoire", ("2019-10-13", "Sainte Victoire")),
    ("2020_02_30_Impossible", None),
    ("Photos diverses", None),
    ("2021_04_02", None),
])
def test_parse_folder_name(name, expected):
    assert parse_folder_name(name) == expected


@pytest.fixture
def legacy_tree(tmp_path):
    hike_dir = tmp_path / "2021_04_02_Tour_du_lac"
    hike_dir.mkdir()
    (hike_dir / "IMG_1.JPG").write_bytes(b"jpeg")
    (hike_dir / "IMG_2.png").write_bytes(b"png")
    (hike_dir / "Thumbs.db").write_bytes(b"junk")
    (tmp_path / "vrac").mkdir()
    return tmp_path


def test_migration_imports_and_is_idempotent(db, legacy_tree):
    admin = db.add("profiles", role="admin", email="president@example.org")
    db.storage.buckets.clear()

    first = migrate(db, legacy_tree, "photos")
    second = migrate(db, legacy_tree, "photos")

    hike = db.rows("hikes")[0]
    assert len(db.rows("hikes")) == 1
    assert hike["title"] == "Tour du lac"
    assert hike["date"] == "2021-04-02"
    assert hike["status"] == "published"
    assert hike["description"] == IMPORTED_DESCRIPTION
    assert hike["created_by"] == admin["id"]
    assert sorted(p["storage_path"] for p in db.rows("photos")) == [
        f"{hike['id']}/IMG_1.JPG", f"{hike['id']}/IMG_2.png",
    ]
    assert "photos" in db.storage.buckets
    assert (first.hikes_created, first.photos_linked, first.skipped_folders) == (1, 2, ["vrac"])
    assert (second.hikes_existing, second.photos_existing, second.photos_linked) == (1, 2, 0)


def test_migration_continues_after_photo_failure(db, legacy_tree):
    db.storage.failing_uploads.add("photos")

    summary = migrate(db, legacy_tree, "photos")

    assert summary.photos_failed == 2
    assert summary.hikes_created == 1
    assert db.rows("photos") == []
