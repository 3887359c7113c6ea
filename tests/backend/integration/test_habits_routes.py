import asyncio
import datetime as dt

import pytest

from app.models import Completion, Habit
from app.services.streaks import period_start


pytestmark = pytest.mark.asyncio


async def _create_habit(client, headers, name="Read", frequency="daily", category="study", **extra):
    return await client.post(
        "/api/v1/habits",
        headers=headers,
        json={"name": name, "category": category, "frequency": frequency, **extra},
    )


async def _backfill(habit_id, user_id, days_back, frequency="daily"):
    """Insert past completions directly, bypassing the current-period check-in."""
    now = dt.datetime.now(dt.timezone.utc)
    for n in days_back:
        moment = now - dt.timedelta(days=n)
        await Completion.create(
            habit_id=habit_id,
            user_id=user_id,
            completed_at=moment,
            period_start=period_start(frequency, moment),
        )


async def test_full_habit_crud_flow(client, create_user, auth_headers):
    user = await create_user()
    headers = auth_headers(user)

    list_resp = await client.get("/api/v1/habits", headers=headers)
    assert list_resp.status_code == 200
    assert list_resp.json()["data"]["habits"] == []

    create_resp = await _create_habit(client, headers, name="  Read  ", notes=" 20 pages ")
    assert create_resp.status_code == 201
    habit = create_resp.json()["data"]["habit"]
    assert habit["name"] == "Read"
    assert habit["notes"] == "20 pages"
    assert habit["color"] == "#3b82f6"
    assert habit["userId"] == str(user.id)

    update_resp = await client.put(
        f"/api/v1/habits/{habit['id']}",
        headers=headers,
        json={"name": "Read books", "color": "#ff0000"},
    )
    assert update_resp.status_code == 200
    updated = update_resp.json()["data"]["habit"]
    assert updated["name"] == "Read books"
    assert updated["color"] == "#ff0000"
    assert updated["category"] == "study"

    delete_resp = await client.delete(f"/api/v1/habits/{habit['id']}", headers=headers)
    assert delete_resp.status_code == 200
    assert delete_resp.json()["data"]["deleted"] is True

    missing_resp = await client.delete(f"/api/v1/habits/{habit['id']}", headers=headers)
    assert missing_resp.status_code == 404


async def test_duplicate_habit_names_rejected(client, create_user, auth_headers):
    headers = auth_headers(await create_user())
    await _create_habit(client, headers, name="Run", category="health")

    dup = await _create_habit(client, headers, name=" Run ", category="health")
    assert dup.status_code == 400
    assert dup.json()["error"]["message"] == "You already have a habit with this name"

    # Names are case-sensitive
    other_case = await _create_habit(client, headers, name="run", category="health")
    assert other_case.status_code == 201

    rename = await client.put(
        f"/api/v1/habits/{other_case.json()['data']['habit']['id']}",
        headers=headers,
        json={"name": "Run"},
    )
    assert rename.status_code == 400


async def test_same_name_allowed_for_different_users(client, create_user, auth_headers):
    first = await _create_habit(client, auth_headers(await create_user()), name="Meditate")
    second = await _create_habit(client, auth_headers(await create_user()), name="Meditate")
    assert first.status_code == 201
    assert second.status_code == 201


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"name": "", "category": "health", "frequency": "daily"}, "Habit name is required"),
        ({"name": "x" * 101, "category": "health", "frequency": "daily"}, "Habit name too long"),
        ({"name": "Swim", "category": "fun", "frequency": "daily"}, "Invalid category"),
        ({"name": "Swim", "category": "health", "frequency": "monthly"}, "Frequency must be daily or weekly"),
    ],
)
async def test_habit_validation(client, create_user, auth_headers, payload, message):
    resp = await client.post("/api/v1/habits", headers=auth_headers(await create_user()), json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == message


async def test_habits_are_isolated_per_user(client, create_user, auth_headers):
    owner_headers = auth_headers(await create_user())
    other_headers = auth_headers(await create_user())
    habit_id = (await _create_habit(client, owner_headers)).json()["data"]["habit"]["id"]

    assert (await client.put(f"/api/v1/habits/{habit_id}", headers=other_headers, json={"name": "x"})).status_code == 404
    assert (await client.delete(f"/api/v1/habits/{habit_id}", headers=other_headers)).status_code == 404
    assert (await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=other_headers, json={})).status_code == 404
    assert (await client.get("/api/v1/habits", headers=other_headers)).json()["data"]["habits"] == []

    # Malformed ids look the same as missing ones
    assert (await client.delete("/api/v1/habits/not-a-uuid", headers=owner_headers)).status_code == 404


async def test_check_in_twice_in_one_period_conflicts(client, create_user, auth_headers):
    headers = auth_headers(await create_user())
    habit_id = (await _create_habit(client, headers)).json()["data"]["habit"]["id"]

    first = await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=headers, json={"notes": " done "})
    assert first.status_code == 201
    assert first.json()["data"]["completion"]["notes"] == "done"

    second = await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=headers, json={})
    assert second.status_code == 400
    assert second.json()["error"]["message"] == "Already completed for this period"
    assert await Completion.filter(habit_id=habit_id).count() == 1


async def test_concurrent_check_ins_record_one_completion(client, create_user, auth_headers):
    headers = auth_headers(await create_user())
    habit_id = (await _create_habit(client, headers, frequency="weekly")).json()["data"]["habit"]["id"]

    responses = await asyncio.gather(*[
        client.post(f"/api/v1/habits/{habit_id}/checkin", headers=headers, json={})
        for _ in range(5)
    ])

    assert sorted(r.status_code for r in responses) == [201, 400, 400, 400, 400]
    assert await Completion.filter(habit_id=habit_id).count() == 1


async def test_check_in_then_undo_restores_history(client, create_user, auth_headers):
    user = await create_user()
    headers = auth_headers(user)
    habit_id = (await _create_habit(client, headers)).json()["data"]["habit"]["id"]
    await _backfill(habit_id, user.id, [1, 2])
    before = sorted(str(c.id) for c in await Completion.filter(habit_id=habit_id))

    assert (await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=headers)).status_code == 201
    undo = await client.delete(f"/api/v1/habits/{habit_id}/checkin", headers=headers)
    assert undo.status_code == 200

    after = sorted(str(c.id) for c in await Completion.filter(habit_id=habit_id))
    assert after == before

    nothing = await client.delete(f"/api/v1/habits/{habit_id}/checkin", headers=headers)
    assert nothing.status_code == 404
    assert nothing.json()["error"]["message"] == "No completion found for this period"


async def test_list_habits_reports_stats(client, create_user, auth_headers):
    user = await create_user()
    headers = auth_headers(user)
    habit_id = (await _create_habit(client, headers)).json()["data"]["habit"]["id"]
    await _backfill(habit_id, user.id, [1, 2, 5])

    habits = (await client.get("/api/v1/habits", headers=headers)).json()["data"]["habits"]
    assert habits[0]["streak"] == 0
    assert habits[0]["completedToday"] is False
    assert habits[0]["totalCompletions"] == 3
    assert habits[0]["progress"] == 10

    await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=headers, json={})

    habits = (await client.get("/api/v1/habits", headers=headers)).json()["data"]["habits"]
    assert habits[0]["streak"] == 3
    assert habits[0]["completedToday"] is True
    assert habits[0]["totalCompletions"] == 4
    assert habits[0]["progress"] == 13


async def test_deleting_habit_removes_completions(client, create_user, auth_headers):
    user = await create_user()
    headers = auth_headers(user)
    habit_id = (await _create_habit(client, headers)).json()["data"]["habit"]["id"]
    await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=headers, json={})

    await client.delete(f"/api/v1/habits/{habit_id}", headers=headers)

    assert await Habit.filter(id=habit_id).count() == 0
    assert await Completion.filter(habit_id=habit_id).count() == 0
