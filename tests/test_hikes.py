from datetime import date

from marcheurs.modules.hikes.schemas import HikeResponse
from marcheurs.modules.hikes.sectioning import partition_hikes, section_hikes

TODAY = date(2025, 6, 1)


def hike(id, day=None, status="published"):
    return HikeResponse(id=id, title=f"Rando {id}", date=day, status=status)


def test_hike_dated_today_is_upcoming():
    upcoming, archived = partition_hikes([hike("a", TODAY), hike("b", date(2025, 5, 31))], TODAY)

    assert [h.id for h in upcoming] == ["a"]
    assert [h.id for h in archived] == ["b"]


def test_sections_are_sorted():
    hikes = [
        hike("later", date(2025, 9, 1)),
        hike("undated"),
        hike("soon", date(2025, 6, 2)),
        hike("old", date(2024, 1, 1)),
        hike("recent", date(2025, 5, 1)),
    ]
    upcoming, archived = partition_hikes(hikes, TODAY)

    assert [h.id for h in upcoming] == ["soon", "later", "undated"]
    assert [h.id for h in archived] == ["recent", "old"]


def test_drafts_hidden_from_members():
    hikes = [hike("draft", date(2025, 7, 1), "draft"), hike("pub", date(2025, 7, 2)), hike("plan", date(2025, 7, 3), "planned")]

    member_view = section_hikes(hikes, TODAY, privileged=False)
    staff_view = section_hikes(hikes, TODAY, privileged=True)

    assert [h.id for h in member_view.upcoming] == ["pub", "plan"]
    assert [h.id for h in staff_view.upcoming] == ["draft", "pub", "plan"]


def test_list_hikes_endpoint_hides_drafts(client, db, login):
    db.add("hikes", title="Sainte-Victoire", date="2099-03-01", status="published")
    db.add("hikes", title="Brouillon", date="2099-04-01", status="draft")
    db.add("hikes", title="Bimont", date="2001-04-02", status="Publiée")

    body = client.get("/api/v1/hikes", headers=login()).json()

    assert [h["title"] for h in body["upcoming"]] == ["Sainte-Victoire"]
    assert [h["title"] for h in body["archived"]] == ["Bimont"]


def test_draft_detail_is_not_found_for_members(client, db, login):
    draft = db.add("hikes", title="Brouillon", date="2099-04-01", status="draft")

    assert client.get(f"/api/v1/hikes/{draft['id']}", headers=login()).status_code == 404
    assert client.get(f"/api/v1/hikes/{draft['id']}", headers=login(role="editor")).status_code == 200


def test_editor_creates_draft_by_default(client, db, login):
    response = client.post(
        "/api/v1/hikes",
        json={"title": "Tour du lac", "date": "2099-05-01", "difficulty": "Facile"},
        headers=login(role="editor"),
    )

    assert response.status_code == 201
    row = db.rows("hikes")[0]
    assert row["status"] == "draft"
    assert row["meeting_point"] == "Parking village"
    assert row["created_by"] == db.rows("profiles")[0]["id"]


def test_walker_cannot_create_hike(client, login):
    response = client.post("/api/v1/hikes", json={"title": "Tour du lac"}, headers=login())
    assert response.status_code == 403


def test_update_only_sends_given_fields(client, db, login):
    row = db.add("hikes", title="Tour du lac", date="2099-05-01", status="draft", location="Bimont")

    response = client.put(f"/api/v1/hikes/{row['id']}", json={"status": "published"}, headers=login(role="admin"))

    assert response.status_code == 200
    assert db.rows("hikes")[0]["status"] == "published"
    assert db.rows("hikes")[0]["location"] == "Bimont"


def test_track_upload_links_public_url(client, db, login):
    row = db.add("hikes", title="Tour du lac", status="published")

    response = client.post(
        f"/api/v1/hikes/{row['id']}/track",
        files={"file": ("trace.gpx", b"<gpx/>", "application/gpx+xml")},
        headers=login(role="admin"),
    )

    assert response.status_code == 200
    gpx_file = db.rows("hikes")[0]["gpx_file"]
    assert gpx_file == response.json()["gpx_file"]
    assert gpx_file.startswith("https://project.supabase.co/storage/v1/object/public/tracks/")
    assert not gpx_file.endswith("?")


def test_track_upload_rejects_other_files(client, db, login):
    row = db.add("hikes", title="Tour du lac", status="published")

    response = client.post(
        f"/api/v1/hikes/{row['id']}/track",
        files={"file": ("trace.kml", b"<kml/>", "application/xml")},
        headers=login(role="admin"),
    )
    assert response.status_code == 400


def test_registration_toggle(client, db, login):
    row = db.add("hikes", title="Tour du lac", date="2099-05-01", status="published")
    headers = login()
    url = f"/api/v1/hikes/{row['id']}/registration"

    first = client.post(url, headers=headers).json()
    second = client.post(url, headers=headers).json()

    assert first == {"hike_id": row["id"], "registered": True, "participants": 1}
    assert second == {"hike_id": row["id"], "registered": False, "participants": 0}


def test_registration_of_draft_hike_is_hidden_from_walkers(client, db, login):
    draft = db.add("hikes", title="Brouillon", date="2099-04-01", status="draft")
    db.add("registrations", hike_id=draft["id"], user_id="someone")
    url = f"/api/v1/hikes/{draft['id']}/registration"

    assert client.get(url, headers=login()).status_code == 404
    assert client.get(url, headers=login(role="editor")).json()["participants"] == 1


def test_registration_of_unknown_hike_is_not_found(client, login):
    response = client.get("/api/v1/hikes/does-not-exist/registration", headers=login())
    assert response.status_code == 404
