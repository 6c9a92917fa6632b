API = "/api/v1"


async def login(client, uid):
    response = await client.post(f"{API}/auth/login", json={"firebaseToken": f"firebase:{uid}"})
    assert response.status_code == 200
    body = response.json()
    return {"Authorization": f"Bearer {body['data']['accessToken']}"}, body["data"]["user"]


async def test_comment_and_like_flow(client):
    headers, _ = await login(client, "alice")

    created = await client.post(f"{API}/games/1942/comments", json={"content": "Great game!"}, headers=headers)
    assert created.status_code == 201
    comment = created.json()["data"]
    assert comment["isEdited"] is False
    assert comment["likesCount"] == 0

    liked = await client.post(f"{API}/comments/{comment['id']}/vote", json={"voteType": "like"}, headers=headers)
    assert liked.json()["data"]["likesCount"] == 1
    assert liked.json()["data"]["action"] == "liked"

    again = await client.post(f"{API}/comments/{comment['id']}/vote", json={"voteType": "like"}, headers=headers)
    assert again.json()["data"]["likesCount"] == 0
    assert again.json()["data"]["action"] == "removed"


async def test_listing_shows_user_vote_only_when_authenticated(client):
    headers, _ = await login(client, "alice")
    created = await client.post(f"{API}/games/1942/comments", json={"content": "Hi"}, headers=headers)
    comment_id = created.json()["data"]["id"]
    await client.post(f"{API}/comments/{comment_id}/vote", json={"voteType": "dislike"}, headers=headers)

    anonymous = await client.get(f"{API}/games/1942/comments")
    assert "userVote" not in anonymous.json()["data"]["comments"][0]

    personal = await client.get(f"{API}/games/1942/comments", headers=headers)
    assert personal.json()["data"]["comments"][0]["userVote"] == "dislike"

    # A broken token on a public route falls back to anonymous
    broken = await client.get(f"{API}/games/1942/comments", headers={"Authorization": "Bearer garbage"})
    assert broken.status_code == 200

    count = await client.get(f"{API}/games/1942/comments/count")
    assert count.json()["data"] == {"gameId": 1942, "count": 1}


async def test_protected_routes_require_token(client):
    response = await client.post(f"{API}/games/1942/comments", json={"content": "Hi"})
    assert response.status_code == 401

    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNAUTHORIZED"
    assert body["error"]["statusCode"] == 401
    assert body["meta"]["path"] == f"{API}/games/1942/comments"


async def test_firebase_token_works_as_bearer(client):
    response = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer firebase:bob"})
    assert response.status_code == 200
    assert response.json()["data"]["firebaseUid"] == "bob"


async def test_validation_errors_use_envelope(client):
    headers, _ = await login(client, "alice")

    empty = await client.post(f"{API}/games/1942/comments", json={"content": ""}, headers=headers)
    assert empty.status_code == 400
    assert empty.json()["error"]["code"] == "VALIDATION_ERROR"

    unknown = await client.post(
        f"{API}/games/1942/comments", json={"content": "ok", "rating": 5}, headers=headers
    )
    assert unknown.status_code == 400

    bad_vote = await client.post(f"{API}/comments/whatever/vote", json={"voteType": "meh"}, headers=headers)
    assert bad_vote.status_code == 400


async def test_foreign_edit_is_forbidden(client):
    alice, _ = await login(client, "alice")
    bob, _ = await login(client, "bob")
    created = await client.post(f"{API}/games/1942/comments", json={"content": "Mine"}, headers=alice)
    comment_id = created.json()["data"]["id"]

    response = await client.put(f"{API}/comments/{comment_id}", json={"content": "Yours"}, headers=bob)
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "You can only edit your own comments"

    deleted = await client.delete(f"{API}/comments/{comment_id}", headers=alice)
    assert deleted.status_code == 200
    missing = await client.get(f"{API}/comments/{comment_id}")
    assert missing.status_code == 404


async def test_replies_and_reactions(client):
    alice, _ = await login(client, "alice")
    bob, _ = await login(client, "bob")
    root = (await client.post(f"{API}/games/1942/comments", json={"content": "Root"}, headers=alice)).json()["data"]

    reply = await client.post(
        f"{API}/games/1942/comments", json={"content": "Reply", "parentCommentId": root["id"]}, headers=bob
    )
    assert reply.status_code == 201

    mismatch = await client.post(
        f"{API}/games/7/comments", json={"content": "Reply", "parentCommentId": root["id"]}, headers=bob
    )
    assert mismatch.status_code == 400

    replies = await client.get(f"{API}/comments/{root['id']}/replies")
    assert replies.json()["data"]["total"] == 1

    reacted = await client.post(f"{API}/comments/{root['id']}/reactions", json={"reactionType": "pro_tip"}, headers=bob)
    assert reacted.json()["data"]["added"] is True

    listed = await client.get(f"{API}/comments/{root['id']}/reactions", headers=bob)
    assert listed.json()["data"]["reactions"] == [{"reactionType": "pro_tip", "count": 1, "userHasReacted": True}]


async def test_catalog_routes(client, fake_igdb):
    search = await client.get(f"{API}/games/search", params={"q": "mario"})
    assert search.status_code == 200
    assert search.json()["data"][0]["name"] == "mario result"

    missing_q = await client.get(f"{API}/games/search")
    assert missing_q.status_code == 400

    fake_igdb.missing.add(5)
    not_found = await client.get(f"{API}/games/5")
    assert not_found.status_code == 404
    assert not_found.json()["error"]["code"] == "GAME_NOT_FOUND"

    headers, _ = await login(client, "alice")
    await client.post(f"{API}/user/games/1942/save", headers=headers)
    detail = await client.get(f"{API}/games/1942", headers=headers)
    assert detail.json()["data"]["is_saved"] is True

    links = await client.get(f"{API}/games/1942/affiliate-links")
    assert links.json()["data"] == {"gameId": 1942, "links": []}


async def test_library_routes(client):
    headers, _ = await login(client, "alice")

    added = await client.post(f"{API}/user/games", json={"gameId": 1942}, headers=headers)
    assert added.status_code == 201

    duplicate = await client.post(f"{API}/user/games", json={"gameId": 1942}, headers=headers)
    assert duplicate.status_code == 409

    played = await client.post(f"{API}/user/games/1942/played", headers=headers)
    assert played.json()["data"]["isPlayed"] is True

    stats = await client.get(f"{API}/user/games/stats", headers=headers)
    assert stats.json()["data"] == {"total": 1, "saved": 1, "played": 1, "totalPlayTime": 0}

    library = await client.get(f"{API}/user/games", headers=headers)
    assert library.json()["data"]["games"][0]["game"]["name"] == "Game 1942"

    removed = await client.delete(f"{API}/user/games/1942", headers=headers)
    assert removed.status_code == 204


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["services"]["redis"] == "healthy"


async def test_page_size_follows_configuration(client, monkeypatch):
    too_large = await client.get(f"{API}/games/1942/comments", params={"limit": 150})
    assert too_large.status_code == 400
    assert too_large.json()["error"]["code"] == "VALIDATION_ERROR"

    monkeypatch.setenv("MAX_PAGE_SIZE", "200")
    allowed = await client.get(f"{API}/games/1942/comments", params={"limit": 150})
    assert allowed.status_code == 200
    assert allowed.json()["data"]["limit"] == 150

    default = await client.get(f"{API}/games/1942/comments")
    assert default.json()["data"]["limit"] == 20
