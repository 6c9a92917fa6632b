from community_api.cache import set_redis_client
from community_api.utils.ratelimit import FixedWindowRateLimiter, rate_limiter


async def test_requests_over_limit_are_rejected(client, monkeypatch):
    monkeypatch.setattr(rate_limiter, "_max_requests", 3)
    monkeypatch.setattr(rate_limiter, "_window_seconds", 86400)

    statuses = [(await client.get("/")).status_code for _ in range(4)]
    assert statuses == [200, 200, 200, 429]

    response = await client.get("/")
    body = response.json()
    assert body["error"]["code"] == "RATE_LIMIT"
    assert body["error"]["statusCode"] == 429
    assert int(response.headers["Retry-After"]) > 0


async def test_local_window_without_redis():
    set_redis_client(None)
    limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60)

    assert (await limiter.hit("10.0.0.1"))[0] is True
    assert (await limiter.hit("10.0.0.1"))[0] is True
    assert (await limiter.hit("10.0.0.1"))[0] is False
    # Other clients have their own window
    assert (await limiter.hit("10.0.0.2"))[0] is True

    limiter.reset()
    assert (await limiter.hit("10.0.0.1"))[0] is True


async def test_rejection_carries_cors_headers(client, monkeypatch):
    monkeypatch.setattr(rate_limiter, "_max_requests", 1)
    monkeypatch.setattr(rate_limiter, "_window_seconds", 86400)
    origin = {"Origin": "http://localhost:3000"}

    await client.get("/", headers=origin)
    response = await client.get("/", headers=origin)

    assert response.status_code == 429
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert "retry-after" in response.headers["access-control-expose-headers"].lower()
