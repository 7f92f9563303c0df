"""
Тесты общего транспорта: User-Agent, cookie, синхронные и асинхронные вызовы.
"""

import asyncio

import pytest

from restful_foundation.config import DEFAULT_USER_AGENT, RESTConfig
from restful_foundation.core.connection import RESTConnection
from restful_foundation.core.transport import TransportClient
from restful_foundation.models import DynamicObject


def test_shared_returns_same_instance():
    first = TransportClient.shared()
    second = TransportClient.shared()

    assert first is second
    assert RESTConnection("http://localhost/").transport is first


def test_shared_is_recreated_after_close():
    first = TransportClient.shared()
    first.close()

    second = TransportClient.shared()

    assert second is not first
    assert not second.closed


def test_default_user_agent():
    assert TransportClient(RESTConfig()).user_agent == DEFAULT_USER_AGENT == "RESTfulFoundation.Client"


def test_user_agent_is_sent(connection):
    result = connection.get("api/whoami", response_model=DynamicObject)

    assert result.userAgent == "RESTfulFoundation.Client"


def test_custom_user_agent_is_sent(server_url):
    with TransportClient(RESTConfig(user_agent="Players.Tests")) as transport:
        connection = RESTConnection(server_url, transport)
        result = connection.get("api/whoami", response_model=DynamicObject)

    assert result.userAgent == "Players.Tests"


def test_cookies_are_shared_between_connections(server_url, transport):
    first = RESTConnection(server_url, transport)
    second = RESTConnection(server_url, transport)

    first.get("api/cookie", response_model=DynamicObject, query="value=shared")
    result = second.get("api/whoami", response_model=DynamicObject)

    assert result.cookie == "shared"
    assert len(transport.cookies) == 1


def test_cookies_are_isolated_between_transports(server_url, transport):
    RESTConnection(server_url, transport).get("api/cookie", response_model=DynamicObject)

    with TransportClient(RESTConfig()) as other:
        result = RESTConnection(server_url, other).get("api/whoami", response_model=DynamicObject)

    assert result.cookie is None


def test_run_sync_from_transport_loop_raises(connection, transport):
    """
    Блокирующий вызов изнутри event loop транспорта не зависает, а сообщает об ошибке.
    """

    async def call_blocking():
        return connection.list("api/Players", response_model=DynamicObject)

    with pytest.raises(RuntimeError):
        transport.submit(call_blocking()).result(timeout=5)


@pytest.mark.asyncio
async def test_blocking_call_inside_running_loop(connection):
    """
    Блокирующий вариант можно вызвать из корутины: запрос выполняется в потоке транспорта.
    """
    result = connection.get("api/Players", 1, response_model=DynamicObject)

    assert result.playerName == "Mickey Mouse"


@pytest.mark.asyncio
async def test_async_call_does_not_block_caller_loop(connection):
    ticks = []

    async def ticker():
        for _ in range(3):
            ticks.append(1)
            await asyncio.sleep(0)

    result, _ = await asyncio.gather(
        connection.get_async("api/Players", 2, response_model=DynamicObject),
        ticker(),
    )

    assert result.playerName == "Donald Duck"
    assert len(ticks) == 3


def test_closed_transport_rejects_requests():
    transport = TransportClient(RESTConfig())
    transport.close()

    assert transport.closed
    with pytest.raises(RuntimeError):
        transport.loop


def test_submit_to_closed_transport_closes_coroutine():
    transport = TransportClient(RESTConfig())
    transport.close()

    async def operation():
        return 1

    coro = operation()
    with pytest.raises(RuntimeError):
        transport.submit(coro)
    assert coro.cr_frame is None
