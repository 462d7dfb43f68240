from lifetracker.settings import reset_settings


def _create_standup(client):
    response = client.post(
        "/v1/calendar/events",
        json={
            "title": "Standup",
            "date": "2024-03-04",
            "startTime": "09:30",
            "location": "Office",
            "recurrence": {"type": "weekly", "interval": 1},
        },
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_requires_backend_token(client):
    response = client.get("/v1/habits", headers={"X-Backend-Token": "wrong"})
    assert response.status_code == 401


def test_user_email_must_look_like_an_address(client):
    assert client.get("/v1/habits", headers={"X-User-Email": "nobody"}).status_code == 401
    assert client.get("/v1/habits", headers={"X-User-Email": "Tester@Example.com"}).status_code == 200


def test_allow_list_rejects_other_users(client, monkeypatch):
    monkeypatch.setenv("ALLOWED_EMAILS", "someone@example.com")
    reset_settings()
    assert client.get("/v1/habits").status_code == 403


def test_calendar_crud_and_day_listing(client):
    event = _create_standup(client)
    assert event["startTime"] == "09:30"
    assert event["recurrence"] == {"type": "weekly", "interval": 1, "endDate": None}

    day = client.get("/v1/calendar/day/2024-03-11").json()
    assert [item["id"] for item in day["items"]] == [event["id"]]
    assert client.get("/v1/calendar/day/2024-03-12").json()["items"] == []

    month = client.get("/v1/calendar/range", params={"start": "2024-03-01", "end": "2024-03-31"}).json()
    assert [entry["date"] for entry in month["days"]] == ["2024-03-04", "2024-03-11", "2024-03-18", "2024-03-25"]

    patched = client.patch(f"/v1/calendar/events/{event['id']}", json={"startTime": None}).json()
    assert patched["startTime"] is None
    assert patched["location"] == "Office"
    assert patched["recurrence"]["type"] == "weekly"

    client.patch(f"/v1/calendar/events/{event['id']}", json={"recurrence": {"type": "none"}})
    assert client.get("/v1/calendar/day/2024-03-11").json()["items"] == []
    assert client.get("/v1/calendar/day/2024-03-04").json()["items"][0]["id"] == event["id"]

    assert client.delete(f"/v1/calendar/events/{event['id']}").json() == {"ok": True}
    assert client.get(f"/v1/calendar/events/{event['id']}").status_code == 404
    assert client.delete(f"/v1/calendar/events/{event['id']}").status_code == 404


def test_calendar_rejects_bad_input(client):
    assert client.post("/v1/calendar/events", json={"title": "  ", "date": "2024-03-04"}).status_code == 400
    response = client.post(
        "/v1/calendar/events",
        json={"title": "X", "date": "2024-03-04", "recurrence": {"type": "daily", "interval": -1}},
    )
    assert response.status_code == 422
    assert client.get("/v1/calendar/range", params={"start": "2024-03-10", "end": "2024-03-01"}).status_code == 400


def test_upcoming_events(client):
    _create_standup(client)
    items = client.get("/v1/calendar/upcoming", params={"start": "2024-03-05", "limit": 2}).json()["items"]
    assert [item["date"] for item in items] == ["2024-03-11", "2024-03-18"]


def test_week_month_and_occurrence_views(client):
    event = _create_standup(client)
    week = client.get("/v1/calendar/week/2024-03-13").json()
    assert week["week"] == 11
    assert week["days"][0]["date"] == "2024-03-11"
    assert len(week["days"]) == 7
    assert [len(entry["items"]) for entry in week["days"]] == [1, 0, 0, 0, 0, 0, 0]

    month = client.get("/v1/calendar/month/2024/3").json()
    assert len(month["days"]) == 31
    assert [entry["date"] for entry in month["days"] if entry["items"]] == [
        "2024-03-04",
        "2024-03-11",
        "2024-03-18",
        "2024-03-25",
    ]
    assert client.get("/v1/calendar/month/2024/13").status_code == 400

    occurrences = client.get(
        f"/v1/calendar/events/{event['id']}/occurrences", params={"start": "2024-03-01", "end": "2024-03-20"}
    ).json()
    assert occurrences["dates"] == ["2024-03-04", "2024-03-11", "2024-03-18"]
    missing = client.get("/v1/calendar/events/nope/occurrences", params={"start": "2024-03-01", "end": "2024-03-02"})
    assert missing.status_code == 404


def test_habits_logs_and_streaks(client):
    habit = client.post("/v1/habits", json={"name": "Read"}).json()
    assert habit["weeklyGoal"] == 7
    assert client.post("/v1/habits", json={"name": "read"}).status_code == 400

    for day in ("2024-03-09", "2024-03-10"):
        response = client.put("/v1/habits/logs", json={"habitId": habit["id"], "date": day, "completed": True})
        assert response.status_code == 200

    streaks = client.get("/v1/habits/streaks", params={"day": "2024-03-10"}).json()
    assert streaks["completionRate"] == 100.0
    assert streaks["items"][0]["currentStreak"] == 2
    assert streaks["items"][0]["completedToday"] is True

    client.put("/v1/habits/logs", json={"habitId": habit["id"], "date": "2024-03-10", "completed": False})
    streaks = client.get("/v1/habits/streaks", params={"day": "2024-03-10"}).json()
    assert streaks["items"][0]["currentStreak"] == 1
    assert streaks["items"][0]["completedToday"] is False

    logs = client.get("/v1/habits/logs", params={"start": "2024-03-01", "end": "2024-03-31"}).json()["logs"]
    assert list(logs) == ["2024-03-09"]

    missing = client.put("/v1/habits/logs", json={"habitId": "nope", "date": "2024-03-10"})
    assert missing.status_code == 404


def test_habit_update_and_deactivate(client):
    habit = client.post("/v1/habits", json={"name": "Run", "weeklyGoal": 3}).json()
    updated = client.patch(f"/v1/habits/{habit['id']}", json={"name": "Morning run"}).json()
    assert updated["name"] == "Morning run"
    assert updated["weeklyGoal"] == 3
    assert client.patch("/v1/habits/unknown", json={"name": "x"}).status_code == 404

    client.delete(f"/v1/habits/{habit['id']}")
    assert client.get("/v1/habits").json()["items"] == []
    inactive = client.get("/v1/habits", params={"include_inactive": True}).json()["items"]
    assert inactive[0]["active"] is False


def test_diary_entries_and_summary(client):
    entry = client.post(
        "/v1/diary",
        json={"date": "2024-03-01", "content": "Hello", "mood": 7, "tags": ["walk"]},
    ).json()
    client.put("/v1/diary/summary/2024-03-01", json={"summary": "Nice"})

    listing = client.get("/v1/diary", params={"start": "2024-03-01"}).json()
    assert [item["id"] for item in listing["items"]] == [entry["id"]]
    assert listing["summaries"] == {"2024-03-01": "Nice"}

    updated = client.patch(f"/v1/diary/{entry['id']}", json={"mood": 9}).json()
    assert updated["mood"] == 9
    assert updated["content"] == "Hello"
    assert updated["tags"] == ["walk"]

    assert client.post("/v1/diary", json={"date": "2024-03-01", "mood": 11}).status_code == 422
    assert client.delete(f"/v1/diary/{entry['id']}").json() == {"ok": True}
    assert client.delete(f"/v1/diary/{entry['id']}").status_code == 404


def test_goals_and_milestones(client):
    goal = client.post(
        "/v1/goals",
        json={"title": "Run a 10k", "milestones": [{"title": "5k"}, {"title": "8k"}], "tags": ["health"]},
    ).json()
    assert goal["completed"] is False

    toggled = client.post(f"/v1/goals/{goal['id']}/milestones/0/toggle").json()
    assert toggled["milestones"][0] == {"title": "5k", "completed": True}
    assert client.post(f"/v1/goals/{goal['id']}/milestones/5/toggle").status_code == 400
    assert client.post("/v1/goals/unknown/milestones/0/toggle").status_code == 404

    client.patch(f"/v1/goals/{goal['id']}", json={"completed": True})
    assert client.get("/v1/goals", params={"status": "active"}).json()["items"] == []
    assert len(client.get("/v1/goals", params={"status": "completed"}).json()["items"]) == 1


def test_preferences(client):
    assert client.get("/v1/preferences").json() == {"notificationsEnabled": False, "targetKcal": 2000, "theme": "system"}
    assert client.patch("/v1/preferences", json={"theme": "neon"}).status_code == 400
    assert client.patch("/v1/preferences", json={"targetKcal": 0}).status_code == 422
    updated = client.patch("/v1/preferences", json={"targetKcal": 1800, "theme": "dark"}).json()
    assert updated == {"notificationsEnabled": False, "targetKcal": 1800, "theme": "dark"}


def test_nutrition_day_totals(client):
    meal = client.post(
        "/v1/nutrition/meals",
        json={"date": "2024-03-01", "type": "Breakfast", "name": "Oats", "kcal": 350},
    ).json()
    client.post("/v1/nutrition/meals", json={"date": "2024-03-01", "name": "Soup", "kcal": 200})
    listing = client.get("/v1/nutrition", params={"start": "2024-03-01"}).json()
    assert listing["targetKcal"] == 2000
    assert listing["days"]["2024-03-01"]["totalKcal"] == 550

    updated = client.patch(f"/v1/nutrition/meals/{meal['id']}", json={"kcal": 400}).json()
    assert updated["kcal"] == 400
    assert updated["name"] == "Oats"
    assert client.post("/v1/nutrition/meals", json={"date": "2024-03-01", "name": "X", "kcal": -5}).status_code == 422


def test_collection_items_and_categories(client):
    categories = client.get("/v1/collection/categories").json()["items"]
    assert len(categories) == 6
    assert client.post("/v1/collection/categories", json={"name": "reading"}).status_code == 400

    category_id = categories[0]["id"]
    item = client.post(
        "/v1/collection",
        json={"title": "FastAPI docs", "url": "https://fastapi.tiangolo.com", "categoryId": category_id},
    ).json()
    assert item["categoryId"] == category_id
    assert len(client.get("/v1/collection", params={"search": "fastapi"}).json()["items"]) == 1
    assert client.get("/v1/collection", params={"categoryId": "other"}).json()["items"] == []
    assert client.delete(f"/v1/collection/{item['id']}").json() == {"ok": True}


def test_ideas(client):
    assert client.post("/v1/ideas", json={"title": "App", "status": "someday"}).status_code == 400
    idea = client.post("/v1/ideas", json={"title": "App"}).json()
    assert idea["status"] == "backlog"
    client.patch(f"/v1/ideas/{idea['id']}", json={"status": "completed"})
    assert len(client.get("/v1/ideas", params={"status": "completed"}).json()["items"]) == 1


def test_reflections(client):
    created = client.post(
        "/v1/reflections",
        json={"type": "weekly", "date": "2024-03-04", "wins": "Ran twice", "nextWeekFocus": "Sleep"},
    ).json()
    assert created["nextWeekFocus"] == "Sleep"
    assert len(client.get("/v1/reflections", params={"type": "weekly"}).json()["items"]) == 1
    assert client.get("/v1/reflections", params={"type": "daily"}).json()["items"] == []
    updated = client.patch(f"/v1/reflections/{created['id']}", json={"wins": "Ran three times"}).json()
    assert updated["wins"] == "Ran three times"
    assert updated["nextWeekFocus"] == "Sleep"


def test_reminders_follow_preferences(client):
    _create_standup(client)
    assert client.get("/v1/reminders", params={"day": "2024-03-10"}).json() == {"enabled": False, "items": []}

    client.patch("/v1/preferences", json={"notificationsEnabled": True})
    items = client.get("/v1/reminders", params={"day": "2024-03-10"}).json()["items"]
    assert [item["title"] for item in items] == ["Standup"]
    assert items[0]["body"] == "Date: 11-03-2024 at 09:30\nLocation: Office"
    assert client.get("/v1/reminders", params={"day": "2024-03-10"}).json()["items"] == []


def test_overviews(client):
    client.post("/v1/nutrition/meals", json={"date": "2024-03-01", "name": "Oats", "kcal": 500})
    nutrition = client.get("/v1/overviews/nutrition", params={"year": 2024, "month": 3}).json()
    assert nutrition["total_kcal"] == 500
    assert nutrition["percentage_of_target"] == 25
    assert client.get("/v1/overviews/habits").status_code == 400
    assert client.get("/v1/overviews/diary", params={"year": 2024, "month": 14}).status_code == 400
    assert client.get("/v1/overviews/goals").json()["total"] == 0


def test_dashboard(client):
    _create_standup(client)
    habit = client.post("/v1/habits", json={"name": "Read"}).json()
    client.put("/v1/habits/logs", json={"habitId": habit["id"], "date": "2024-03-11"})
    client.post("/v1/nutrition/meals", json={"date": "2024-03-11", "name": "Oats", "kcal": 300})

    board = client.get("/v1/dashboard", params={"day": "2024-03-11"}).json()
    assert [event["title"] for event in board["todayEvents"]] == ["Standup"]
    assert board["upcomingEvents"][0]["date"] == "2024-03-18"
    assert board["upcomingEvents"][0]["label"] == "2024-03-18"
    assert board["habits"]["completedToday"] == 1
    assert board["habits"]["topStreaks"][0]["currentStreak"] == 1
    assert board["nutrition"] == {"totalKcal": 300, "targetKcal": 2000, "meals": 1}
