from lifetracker.adapters.snapshot import Snapshot
from lifetracker.migration import verify

EXPECTED = {
    "diary_entries": 2,
    "diary_summaries": 1,
    "collection_items": 1,
    "collection_categories": 1,
    "ideas": 1,
    "events": 2,
    "habits": 2,
    "habit_logs": 2,
    "goals": 1,
    "reflections": 2,
    "meals": 2,
}


def test_verify_reports_mismatches():
    snap = Snapshot(meals=[{"id": "m"}], ideas=[{"id": "i"}])
    result = verify(snap, {"meals": 1, "ideas": 0})
    assert result["ok"] is False
    assert result["mismatches"] == {"ideas": {"expected": 1, "imported": 0}}


def test_import_backup(client, local_backup):
    assert client.get("/v1/migration/status").json() == {"migrated": False, "date": None}

    response = client.post("/v1/migration/import", json={"source": "local", "data": local_backup})
    assert response.status_code == 200, response.text
    result = response.json()
    assert result["imported"] == EXPECTED
    assert result["verification"]["ok"] is True
    assert client.get("/v1/migration/status").json()["migrated"] is True

    prefs = client.get("/v1/preferences").json()
    assert prefs == {"notificationsEnabled": True, "targetKcal": 2200, "theme": "dark"}

    streaks = client.get("/v1/habits/streaks", params={"day": "2024-03-02"}).json()
    by_name = {item["name"]: item for item in streaks["items"]}
    assert by_name["Read"]["currentStreak"] == 2
    assert by_name["Run"]["currentStreak"] == 0

    items = client.get("/v1/collection").json()["items"]
    categories = client.get("/v1/collection/categories").json()["items"]
    assert items[0]["categoryId"] == categories[0]["id"]

    birthday = client.get("/v1/calendar/day/2028-02-29").json()["items"]
    assert [event["title"] for event in birthday] == ["Birthday"]


def test_second_import_needs_force(client, local_backup):
    client.post("/v1/migration/import", json={"data": local_backup})
    again = client.post("/v1/migration/import", json={"data": local_backup})
    assert again.status_code == 409

    forced = client.post("/v1/migration/import", json={"data": local_backup, "force": True}).json()
    assert forced["verification"]["ok"] is True
    assert len(client.get("/v1/habits").json()["items"]) == 2


def test_invalid_backup_is_rejected(client):
    response = client.post("/v1/migration/import", json={"source": "local", "data": {"dagboek": {}}})
    assert response.status_code == 400


def test_verify_and_export_after_import(client, local_backup):
    client.post("/v1/migration/import", json={"data": local_backup})
    verification = client.post("/v1/migration/verify", json={"data": local_backup}).json()
    assert verification["ok"] is True

    exported = client.get("/v1/export").json()
    assert exported["version"] == "1.0.0"
    assert exported["voeding"]["targetKcal"] == 2200
    assert exported["voeding"]["meals"]["2024-03-01"]["totalKcal"] == 1050
    assert sorted(event["title"] for event in exported["kalender"]["events"]) == ["Birthday", "Standup"]
    assert exported["dagboek"]["2024-03-01"]["daySummary"] == "Good day"

    reset = client.delete("/v1/migration/status").json()
    assert reset == {"migrated": False, "date": None}
