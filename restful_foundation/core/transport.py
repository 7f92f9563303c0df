"""
Общий HTTP-транспорт клиента RESTfulFoundation.

Один TransportClient владеет одной aiohttp-сессией: одним пулом соединений
и одним хранилищем cookie. Все запросы выполняются в собственном event loop
транспорта, работающем в отдельном потоке.
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Awaitable, Optional, TypeVar

import aiohttp
from aiohttp.abc import AbstractCookieJar

from ..config import RESTConfig


logger = logging.getLogger("restful_foundation")

T = TypeVar("T")


class TransportClient:
    """
    HTTP-транспорт с общим хранилищем cookie и фиксированным User-Agent.

    Обычно в процессе существует один транспорт (см. shared()), который
    разделяют все RESTConnection. Его можно создать и явно и передать
    соединениям, чтобы изолировать набор cookie.

    Attributes:
        config: Настройки клиента
        user_agent: Значение заголовка User-Agent
    """

    _shared: Optional["TransportClient"] = None
    _shared_lock = threading.Lock()

    def __init__(self, config: Optional[RESTConfig] = None):
        """
        Инициализация транспорта. Поток и сессия создаются при первом запросе.

        Args:
            config: Настройки клиента. Если не указаны, читаются из окружения.
        """
        self.config = config or RESTConfig()
        self.user_agent = self.config.user_agent
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._session: Optional[aiohttp.ClientSession] = None
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def shared(cls, config: Optional[RESTConfig] = None) -> "TransportClient":
        """
        Возвращает общий для процесса транспорт, создавая его при первом вызове.

        Args:
            config: Настройки, используемые только при создании транспорта

        Returns:
            TransportClient: Общий транспорт
        """
        with cls._shared_lock:
            if cls._shared is None or cls._shared.closed:
                cls._shared = cls(config)
            return cls._shared

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """Event loop транспорта; поток запускается при первом обращении."""
        with self._lock:
            if self._closed:
                raise RuntimeError("TransportClient закрыт")
            if self._loop is None:
                self._start()
            return self._loop

    @property
    def cookies(self) -> Optional[AbstractCookieJar]:
        """Хранилище cookie, общее для всех соединений этого транспорта."""
        return self._session.cookie_jar if self._session is not None else None

    def _start(self) -> None:
        loop = asyncio.new_event_loop()
        ready = threading.Event()

        def run() -> None:
            asyncio.set_event_loop(loop)
            loop.call_soon(ready.set)
            loop.run_forever()
            loop.close()

        thread = threading.Thread(target=run, name="restful-foundation-transport", daemon=True)
        thread.start()
        ready.wait()

        self._loop = loop
        self._thread = thread
        asyncio.run_coroutine_threadsafe(self._open_session(), loop).result()
        logger.debug(f"Транспорт запущен, User-Agent: {self.user_agent}")

    async def _open_session(self) -> None:
        self._session = aiohttp.ClientSession(
            headers={"User-Agent": self.user_agent},
            cookie_jar=aiohttp.CookieJar(unsafe=True),
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            connector=aiohttp.TCPConnector(
                limit=self.config.max_connections,
                ttl_dns_cache=300,
            ),
        )

    def request(self, method: str, url: str, **kwargs: Any):
        """
        Выполняет HTTP-запрос через общую сессию.

        Вызывается только из event loop транспорта. Возвращает асинхронный
        контекстный менеджер ответа aiohttp.

        Args:
            method: HTTP-метод
            url: Полный URL
            **kwargs: Аргументы aiohttp.ClientSession.request (data, headers)
        """
        if self._session is None or self._session.closed:
            raise RuntimeError("HTTP сессия транспорта не инициализирована")
        return self._session.request(method, url, ssl=self.config.verify_ssl, **kwargs)

    def in_transport_loop(self) -> bool:
        """Выполняется ли текущий код внутри event loop транспорта."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            return False
        return running is self._loop

    def submit(self, coro: Awaitable[T]) -> "concurrent.futures.Future[T]":
        """
        Ставит корутину на выполнение в event loop транспорта.

        Returns:
            concurrent.futures.Future: Будущий результат корутины

        Raises:
            RuntimeError: Если транспорт закрыт (корутина при этом закрывается)
        """
        try:
            loop = self.loop
        except RuntimeError:
            coro.close()
            raise
        return asyncio.run_coroutine_threadsafe(coro, loop)

    async def run_async(self, coro: Awaitable[T]) -> T:
        """
        Выполняет корутину в транспорте, не блокируя event loop вызывающего.
        """
        if self.in_transport_loop():
            return await coro
        return await asyncio.wrap_future(self.submit(coro))

    def run_sync(self, coro: Awaitable[T]) -> T:
        """
        Выполняет корутину в транспорте и синхронно ждет результат.

        Raises:
            RuntimeError: Если вызвано из event loop самого транспорта
                          (ожидание привело бы к взаимной блокировке)
        """
        if self.in_transport_loop():
            coro.close()
            raise RuntimeError(
                "Блокирующий вызов из event loop транспорта приведет к взаимной блокировке. "
                "Используйте асинхронный вариант метода"
            )
        return self.submit(coro).result()

    def close(self) -> None:
        """
        Закрывает HTTP-сессию и останавливает поток транспорта.

        Общему транспорту закрытие не требуется: поток демонический
        и завершается вместе с процессом.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread

        if loop is None:
            return

        if self._session is not None and not self._session.closed:
            asyncio.run_coroutine_threadsafe(self._session.close(), loop).result()
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        logger.debug("Транспорт остановлен")

    def __enter__(self) -> "TransportClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
