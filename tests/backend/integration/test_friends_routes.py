import datetime as dt
import uuid

import pytest

from app.models import Completion, Friendship
from app.services.streaks import period_start


pytestmark = pytest.mark.asyncio


async def _follow(client, headers, user_id):
    return await client.post("/api/v1/friends", headers=headers, json={"userId": str(user_id)})


async def _habit(client, headers, name="Stretch", frequency="daily"):
    resp = await client.post(
        "/api/v1/habits",
        headers=headers,
        json={"name": name, "category": "health", "frequency": frequency},
    )
    return resp.json()["data"]["habit"]["id"]


async def test_follow_rules(client, create_user, auth_headers):
    alice = await create_user("alice")
    bob = await create_user("bob")
    headers = auth_headers(alice)

    self_follow = await _follow(client, headers, alice.id)
    assert self_follow.status_code == 400
    assert self_follow.json()["error"]["message"] == "Cannot follow yourself"

    missing = await _follow(client, headers, uuid.uuid4())
    assert missing.status_code == 404

    first = await _follow(client, headers, bob.id)
    assert first.status_code == 201
    assert first.json()["data"]["friendship"]["followingId"] == str(bob.id)

    second = await _follow(client, headers, bob.id)
    assert second.status_code == 400
    assert second.json()["error"]["message"] == "Already following this user"
    assert await Friendship.filter(follower_id=alice.id).count() == 1


async def test_follow_requires_user_id(client, create_user, auth_headers):
    resp = await client.post("/api/v1/friends", headers=auth_headers(await create_user()), json={"userId": ""})
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "User ID is required"


async def test_unfollow(client, create_user, auth_headers):
    alice = await create_user("alice")
    bob = await create_user("bob")
    headers = auth_headers(alice)
    await _follow(client, headers, bob.id)

    resp = await client.delete(f"/api/v1/friends/{bob.id}", headers=headers)
    assert resp.status_code == 200

    again = await client.delete(f"/api/v1/friends/{bob.id}", headers=headers)
    assert again.status_code == 404
    assert again.json()["error"]["message"] == "Not following this user"


async def test_following_and_followers_lists(client, create_user, auth_headers):
    alice = await create_user("alice")
    bob = await create_user("bob")
    carol = await create_user("carol")
    await _follow(client, auth_headers(alice), bob.id)
    await _follow(client, auth_headers(carol), bob.id)
    await _habit(client, auth_headers(bob))

    following = await client.get("/api/v1/friends?type=following", headers=auth_headers(alice))
    assert following.status_code == 200
    items = following.json()["data"]["following"]
    assert [u["username"] for u in items] == ["bob"]
    assert items[0]["totalHabits"] == 1
    assert items[0]["totalCompletions"] == 0

    followers = await client.get("/api/v1/friends?type=followers", headers=auth_headers(bob))
    assert {u["username"] for u in followers.json()["data"]["followers"]} == {"alice", "carol"}


async def test_activity_feed_empty_without_follows(client, create_user, auth_headers):
    resp = await client.get("/api/v1/friends", headers=auth_headers(await create_user()))
    assert resp.status_code == 200
    assert resp.json()["data"]["activity"] == []


async def test_activity_feed_shows_followed_check_ins_with_streak(client, create_user, auth_headers):
    alice = await create_user("alice")
    bob = await create_user("bob")
    carol = await create_user("carol")
    await _follow(client, auth_headers(alice), bob.id)

    habit_id = await _habit(client, auth_headers(bob))
    # Bob completed yesterday too, so today's check-in makes a 2-day streak
    yesterday = dt.datetime.now(dt.timezone.utc) - dt.timedelta(days=1)
    await Completion.create(
        habit_id=habit_id, user_id=bob.id, completed_at=yesterday,
        period_start=period_start("daily", yesterday),
    )
    await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=auth_headers(bob), json={"notes": "easy"})

    # Not followed, must not show up
    other = await _habit(client, auth_headers(carol), name="Other")
    await client.post(f"/api/v1/habits/{other}/checkin", headers=auth_headers(carol), json={})

    resp = await client.get("/api/v1/friends?type=activity", headers=auth_headers(alice))
    activity = resp.json()["data"]["activity"]

    assert len(activity) == 2
    latest = activity[0]
    assert latest["notes"] == "easy"
    assert latest["user"] == {"id": str(bob.id), "username": "bob", "avatar": None}
    assert latest["habit"]["id"] == habit_id
    assert latest["habit"]["frequency"] == "daily"
    assert latest["streak"] == 2
    # Every entry carries the current streak, not the streak at event time
    assert activity[1]["streak"] == 2
    assert activity[0]["completedAt"] > activity[1]["completedAt"]


async def test_activity_feed_single_entry_per_check_in(client, create_user, auth_headers):
    alice = await create_user("alice")
    bob = await create_user("bob")
    await _follow(client, auth_headers(alice), bob.id)
    habit_id = await _habit(client, auth_headers(bob), frequency="weekly")
    await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=auth_headers(bob), json={})

    activity = (await client.get("/api/v1/friends", headers=auth_headers(alice))).json()["data"]["activity"]

    assert len(activity) == 1
    assert activity[0]["habit"]["id"] == habit_id
    assert activity[0]["streak"] == 1


async def test_activity_feed_respects_limit(client, create_user, auth_headers):
    alice = await create_user("alice")
    bob = await create_user("bob")
    await _follow(client, auth_headers(alice), bob.id)
    for i in range(3):
        habit_id = await _habit(client, auth_headers(bob), name=f"Habit {i}")
        await client.post(f"/api/v1/habits/{habit_id}/checkin", headers=auth_headers(bob), json={})

    activity = (await client.get("/api/v1/friends?limit=2", headers=auth_headers(alice))).json()["data"]["activity"]
    assert len(activity) == 2


async def test_search_users_excludes_self_and_followed(client, create_user, auth_headers):
    alice = await create_user("alice")
    bob = await create_user("bobby")
    await create_user("bobcat")
    await _follow(client, auth_headers(alice), bob.id)

    resp = await client.get("/api/v1/users/search?q=BOB", headers=auth_headers(alice))
    users = resp.json()["data"]["users"]
    assert [u["username"] for u in users] == ["bobcat"]
    assert users[0]["followersCount"] == 0

    everyone = await client.get("/api/v1/users/search", headers=auth_headers(alice))
    assert "alice" not in {u["username"] for u in everyone.json()["data"]["users"]}
