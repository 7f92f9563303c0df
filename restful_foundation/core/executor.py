"""
Выполнение HTTP-запросов RESTfulFoundation.
"""

import asyncio
import io
import logging
from typing import Any, Optional, Union

import aiohttp

from ..exceptions import (
    RESTConstructionError,
    RESTError,
    RESTHttpStatusError,
    RESTTransportError,
    describe_exception,
)
from ..models import RawResponse, RESTResult
from ..utils import serialize_body
from .enums import RequestMethod
from .transport import TransportClient


logger = logging.getLogger("restful_foundation")

BODY_REQUIRED = "Body cannot be Null or Empty"


class RequestExecutor:
    """
    Отправляет запросы через общий транспорт и классифицирует ответы.

    Исполнитель не разбирает JSON: при успехе он возвращает тело ответа
    как поток, при ошибке - текст диагностики.

    Attributes:
        transport: Транспорт, через который выполняются запросы
    """

    def __init__(self, transport: TransportClient):
        self.transport = transport

    async def execute(
        self,
        url: str,
        method: Union[RequestMethod, str] = RequestMethod.GET,
        body: Optional[Any] = None,
    ) -> RESTResult[RawResponse]:
        """
        Выполняет запрос и возвращает поток ответа или диагностику.

        Вызывается в event loop транспорта.

        Args:
            url: Полный URL запроса
            method: HTTP-метод
            body: Тело запроса (для PUT/POST обязательно)

        Returns:
            RESTResult[RawResponse]: Ответ при статусе 2xx, иначе список сообщений
        """
        try:
            response = await self._send(url, RequestMethod(method), body)
        except RESTHttpStatusError as e:
            return RESTResult.fail(*e.to_info(), status=e.status_code)
        except RESTError as e:
            return RESTResult.fail(*e.to_info())
        return RESTResult.ok(response, status=response.status)

    async def _send(self, url: str, method: RequestMethod, body: Optional[Any]) -> RawResponse:
        if method.requires_body and body is None:
            logger.error(f"Запрос {method.value} {url} без тела")
            raise RESTConstructionError(BODY_REQUIRED)

        try:
            data = serialize_body(body) if body is not None else None
        except (TypeError, ValueError) as e:
            logger.error(f"Не удалось сериализовать тело запроса {method.value} {url}: {e!s}")
            raise RESTConstructionError(describe_exception(e), details=repr(body)[:200]) from e

        headers = {"Content-Type": "application/json"} if data is not None else None

        logger.debug(f"Запрос {method.value} {url}")
        if data:
            logger.debug(f"Данные запроса: {data[:200]!r}")

        try:
            async with self.transport.request(method.value, url, data=data, headers=headers) as response:
                logger.debug(f"Получен ответ с кодом: {response.status}")

                if 200 <= response.status < 300:
                    payload = await response.read()
                    return RawResponse(status=response.status, reason=response.reason, stream=io.BytesIO(payload))

                response_text = await response.text(errors="replace")
                logger.error(f"Ошибка API: {response.status} - {response_text[:200]} (URL: {url})")
                message = response_text or f"{response.status} {response.reason or ''}".strip()
                raise RESTHttpStatusError(response.status, message, details=response_text)

        except aiohttp.ClientError as e:
            logger.error(f"Ошибка соединения: {e!s}")
            cause = getattr(e, "os_error", None) or e.__cause__
            raise RESTTransportError(describe_exception(e), cause=cause) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Таймаут запроса: {url}")
            raise RESTTransportError(describe_exception(e), cause=e.__cause__) from e
        except OSError as e:
            logger.error(f"Сетевая ошибка: {e!s}")
            raise RESTTransportError(describe_exception(e), cause=e.__cause__) from e
