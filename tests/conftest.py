"""
Конфигурация pytest и общие фикстуры для тестов.

Вместо внешнего CRUD-сервера тесты используют небольшое aiohttp-приложение
со списком игроков, запущенное в отдельном потоке со своим event loop.
Так блокирующие варианты методов не мешают серверу отвечать.
"""

import asyncio
import threading
from typing import Dict, Optional

import pytest
from aiohttp import web

from restful_foundation.config import RESTConfig
from restful_foundation.core.connection import RESTConnection
from restful_foundation.core.transport import TransportClient


PLAYERS_PATH = "/api/Players"

SEED_PLAYERS = [
    {"playerId": 1, "playerName": "Mickey Mouse"},
    {"playerId": 2, "playerName": "Donald Duck"},
    {"playerId": 3, "playerName": "Goofy"},
]

players_key = web.AppKey("players", dict)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Тестовый сервер
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _find_player(request: web.Request) -> Dict:
    player = request.app[players_key].get(int(request.match_info["id"]))
    if player is None:
        raise web.HTTPNotFound(text=f"Player {request.match_info['id']} not found")
    return player


async def list_players(request: web.Request) -> web.Response:
    players = sorted(request.app[players_key].values(), key=lambda p: p["playerId"])
    page = request.query.get("page")
    per_page = request.query.get("perPage")

    if page is not None and per_page is not None:
        start = int(page) * int(per_page)
        return web.json_response(
            {
                "succeeded": True,
                "totalRecords": len(players),
                "page": int(page),
                "perPage": int(per_page),
                "list": players[start : start + int(per_page)],
            }
        )
    if request.query.get("wrapped"):
        return web.json_response({"totalRecords": len(players), "list": players})
    return web.json_response(players)


async def get_player(request: web.Request) -> web.Response:
    return web.json_response(_find_player(request))


async def create_player(request: web.Request) -> web.Response:
    players = request.app[players_key]
    data = await request.json()
    player_id = data.get("playerId") or max(players, default=0) + 1
    player = {"playerId": player_id, "playerName": data.get("playerName")}
    players[player_id] = player
    return web.json_response(player, status=201)


async def update_player(request: web.Request) -> web.Response:
    player = _find_player(request)
    data = await request.json()
    player["playerName"] = data.get("playerName")
    return web.json_response(player)


async def delete_player(request: web.Request) -> web.Response:
    player = _find_player(request)
    del request.app[players_key][player["playerId"]]
    return web.json_response({"succeeded": True, "info": ["Delete Successful"]})


async def query_players(request: web.Request) -> web.Response:
    criteria = await request.json()
    name = (criteria.get("playerName") or "").lower()
    found = [p for p in request.app[players_key].values() if name in (p["playerName"] or "").lower()]
    return web.json_response({"succeeded": True, "totalRecords": len(found), "list": found})


async def delete_no_content(request: web.Request) -> web.Response:
    return web.Response(status=204)


async def delete_accepted(request: web.Request) -> web.Response:
    return web.json_response({"queued": True}, status=202)


async def broken_json(request: web.Request) -> web.Response:
    return web.Response(text='{"playerId": 1, "playerName": ', content_type="application/json")


async def scalar_json(request: web.Request) -> web.Response:
    return web.Response(text="42", content_type="application/json")


async def null_json(request: web.Request) -> web.Response:
    return web.Response(text="null", content_type="application/json")


async def set_cookie(request: web.Request) -> web.Response:
    response = web.json_response({"succeeded": True})
    response.set_cookie("session", request.query.get("value", "abc"))
    return response


async def who_am_i(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "cookie": request.cookies.get("session"),
            "userAgent": request.headers.get("User-Agent"),
        }
    )


def create_app() -> web.Application:
    app = web.Application()
    app[players_key] = {}
    app.router.add_get(f"{PLAYERS_PATH}/", list_players)
    app.router.add_post(f"{PLAYERS_PATH}/", create_player)
    app.router.add_post(f"{PLAYERS_PATH}/query/", query_players)
    app.router.add_get(PLAYERS_PATH + r"/{id:\d+}/", get_player)
    app.router.add_put(PLAYERS_PATH + r"/{id:\d+}/", update_player)
    app.router.add_delete(PLAYERS_PATH + r"/{id:\d+}/", delete_player)
    app.router.add_delete("/api/nocontent/{id}/", delete_no_content)
    app.router.add_delete("/api/accepted/{id}/", delete_accepted)
    app.router.add_get("/api/broken/", broken_json)
    app.router.add_get("/api/broken/{id}/", broken_json)
    app.router.add_get("/api/scalar/", scalar_json)
    app.router.add_get("/api/null/{id}/", null_json)
    app.router.add_get("/api/cookie/", set_cookie)
    app.router.add_get("/api/whoami/", who_am_i)
    return app


class PlayersServer:
    """Тестовый CRUD-сервер в отдельном потоке."""

    def __init__(self):
        self.app = create_app()
        self.url: Optional[str] = None
        self._loop = asyncio.new_event_loop()
        self._runner: Optional[web.AppRunner] = None
        self._thread = threading.Thread(target=self._loop.run_forever, name="players-server", daemon=True)

    def start(self) -> None:
        self._thread.start()
        asyncio.run_coroutine_threadsafe(self._start(), self._loop).result()

    async def _start(self) -> None:
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "127.0.0.1", 0)
        await site.start()
        host, port = self._runner.addresses[0][:2]
        self.url = f"http://{host}:{port}/"

    def stop(self) -> None:
        asyncio.run_coroutine_threadsafe(self._runner.cleanup(), self._loop).result()
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()

    def reset(self) -> None:
        players = self.app[players_key]
        players.clear()
        players.update({p["playerId"]: dict(p) for p in SEED_PLAYERS})


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Фикстуры
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@pytest.fixture(scope="session")
def players_server():
    """Сервер запускается один раз на сессию."""
    server = PlayersServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def server_url(players_server) -> str:
    """URL сервера с исходным набором игроков."""
    players_server.reset()
    return players_server.url


@pytest.fixture
def settings(server_url) -> RESTConfig:
    return RESTConfig(root_path=server_url, timeout=10)


@pytest.fixture
def transport(settings):
    """Отдельный транспорт на каждый тест, чтобы cookie не переходили между тестами."""
    client = TransportClient(settings)
    yield client
    client.close()


@pytest.fixture
def connection(server_url, transport) -> RESTConnection:
    return RESTConnection(server_url, transport)
