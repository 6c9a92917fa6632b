import pytest

from community_api.cache import Cache, RedisKeys, hash_params
from community_api.endpoints.igdb import IgdbClient, category_where_clause, escape_search_term
from community_api.models import Anonymous, Authenticated, CatalogEndpoint
from community_api.db.dao import LibraryDAO
from community_api.services.catalog_service import CatalogService, catalog_service
from community_api.utils.exceptions import NotFoundError


class BrokenRedis:
    async def get(self, key):
        raise ConnectionError("redis down")

    async def setex(self, key, ttl, value):
        raise ConnectionError("redis down")

    async def delete(self, *keys):
        raise ConnectionError("redis down")


async def test_game_lookup_is_cached(fake_igdb, fake_redis):
    first = await catalog_service.get_game_by_id(1942)
    second = await catalog_service.get_game_by_id(1942)

    assert first == second == {"id": 1942, "name": "Game 1942"}
    assert fake_igdb.calls == [("game", 1942)]

    key = CatalogService.cache_key(CatalogEndpoint.GAME, id=1942)
    assert key.startswith("catalog:game:")
    assert fake_redis.ttls[key] == 86400


async def test_distinct_params_use_distinct_keys(fake_igdb, fake_redis):
    await catalog_service.search_games("zelda", 10)
    await catalog_service.search_games("zelda", 5)
    await catalog_service.search_games("zelda", 10)

    assert [c for c in fake_igdb.calls if c[0] == "search"] == [("search", "zelda", 10), ("search", "zelda", 5)]
    assert hash_params({"q": "zelda", "limit": 10}) == hash_params({"limit": 10, "q": "zelda", "page": None})


async def test_listings_are_cached_per_endpoint(fake_igdb, fake_redis):
    await catalog_service.get_trending_games(20)
    await catalog_service.get_popular_games(20)
    await catalog_service.get_games_by_category("RPG", 20, 0)
    await catalog_service.get_games_by_category("rpg", 20, 0)

    assert fake_igdb.calls == [("trending", 20), ("popular", 20), ("category", "rpg", 20, 0)]


async def test_missing_game_is_not_cached(fake_igdb, fake_redis):
    fake_igdb.missing.add(404)

    with pytest.raises(NotFoundError):
        await catalog_service.get_game_by_id(404)
    with pytest.raises(NotFoundError):
        await catalog_service.get_game_by_id(404)

    assert fake_igdb.calls == [("game", 404), ("game", 404)]


async def test_redis_failure_degrades_to_upstream(fake_igdb):
    service = CatalogService(client=fake_igdb, cache=Cache(BrokenRedis()))

    assert await service.get_game_by_id(7) == {"id": 7, "name": "Game 7"}
    assert await service.get_game_by_id(7) == {"id": 7, "name": "Game 7"}
    assert len(fake_igdb.calls) == 2


async def test_game_detail_flags_only_for_authenticated(session, make_user, fake_igdb):
    user = await make_user("gamer")
    await LibraryDAO.create(session, user.id, 1942, is_saved=True, is_played=False)
    await session.commit()

    anonymous = await catalog_service.get_game_detail(session, 1942, Anonymous())
    assert "is_saved" not in anonymous.data

    personal = await catalog_service.get_game_detail(session, 1942, Authenticated(user))
    assert personal.data["is_saved"] is True
    assert personal.data["is_played"] is False

    # The cached payload stays free of per-user flags
    cached = await catalog_service.get_game_by_id(1942)
    assert "is_saved" not in cached


async def test_try_get_game_swallows_failures(fake_igdb):
    fake_igdb.failing.add(13)
    assert await catalog_service.try_get_game(13) is None


def test_category_where_clause():
    assert category_where_clause("Popular") == "rating_count > 100"
    assert category_where_clause("trending").startswith("first_release_date >")
    assert category_where_clause("rpg") == "genres = (12)"
    assert category_where_clause("unknown") == "rating_count > 50"


def test_escape_search_term():
    assert escape_search_term('say "hi"') == 'say \\"hi\\"'


async def test_access_token_cached_and_refreshed(fake_redis):
    fetched = []

    class CountingClient(IgdbClient):
        async def _fetch_access_token(self):
            fetched.append(1)
            return f"token-{len(fetched)}", 3600

    client = CountingClient(client_id="id", client_secret="secret")

    assert await client.get_access_token() == "token-1"
    assert await client.get_access_token() == "token-1"
    assert fake_redis.ttls[RedisKeys.igdb_access_token()] == 3600

    assert await client.refresh_access_token() == "token-2"
    assert len(fetched) == 2


async def test_access_token_kept_in_process_without_redis():
    fetched = []

    class CountingClient(IgdbClient):
        async def _fetch_access_token(self):
            fetched.append(1)
            return f"token-{len(fetched)}", 3600

    client = CountingClient(client_id="id", client_secret="secret", cache=Cache(BrokenRedis()))

    assert await client.get_access_token() == "token-1"
    assert await client.get_access_token() == "token-1"
    assert len(fetched) == 1

    assert await client.refresh_access_token() == "token-2"
