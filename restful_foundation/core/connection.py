"""
Соединение с REST API: публичные CRUD-операции клиента RESTfulFoundation.
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional, Type, TypeVar, Union

from ..config import RESTConfig
from ..exceptions import RESTDecodeError
from ..models import RawResponse, RESTObjectList, RESTResult
from ..utils import build_page_query, build_url_string
from .decoder import decode_entity, decode_list
from .enums import RequestMethod
from .executor import RequestExecutor
from .transport import TransportClient


logger = logging.getLogger("restful_foundation")

T = TypeVar("T")
U = TypeVar("U")

EntityId = Union[str, int]

TRANSPORT_CLOSED = "Transport is closed"


class RESTConnection:
    """
    Корень всех обращений клиента к API.

    Каждая операция доступна в двух вариантах: асинхронном (<name>_async),
    который не блокирует event loop вызывающего, и блокирующем (<name>),
    который синхронно ждет выполнения в потоке транспорта.

    Ошибки не выбрасываются: операция возвращает None, пустой список или
    False, а причины ошибки доступны в info до следующего вызова.

    Attributes:
        transport: Общий HTTP-транспорт
        executor: Исполнитель запросов
    """

    def __init__(self, root_path: str, transport: Optional[TransportClient] = None):
        """
        Инициализация соединения.

        Args:
            root_path: Корневой URL API, не меняется после создания
            transport: Транспорт. По умолчанию общий для процесса.
        """
        self._root_path = root_path
        self.transport = transport or TransportClient.shared()
        self.executor = RequestExecutor(self.transport)
        self._last_result: Optional[RESTResult] = None

    @classmethod
    def from_config(
        cls,
        config: Optional[RESTConfig] = None,
        transport: Optional[TransportClient] = None,
    ) -> "RESTConnection":
        """
        Создает соединение по настройкам.

        Raises:
            ValueError: Если в настройках не задан root_path
        """
        config = config or RESTConfig()
        if not config.root_path:
            raise ValueError("Не задан корневой URL API (RESTFUL_ROOT_PATH)")
        return cls(config.root_path, transport or TransportClient.shared(config))

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def info(self) -> List[str]:
        """Диагностика последнего вызова на этом соединении."""
        return list(self._last_result.info) if self._last_result is not None else []

    @property
    def last_result(self) -> Optional[RESTResult]:
        """Полный результат последнего вызова (значение, диагностика, статус)."""
        return self._last_result

    def build_url(self, *parts: Optional[EntityId], query: Optional[str] = None) -> str:
        """Собирает URL относительно корня соединения."""
        return build_url_string(self._root_path, *parts, query=query)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Запуск операций
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def _run_async(
        self,
        operation: Awaitable[RESTResult],
        completion: Optional[Callable[[Any], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
        fallback: Any = None,
    ) -> Any:
        self._last_result = None
        if self.transport.closed:
            return self._finish(self._rejected(operation, fallback), completion, failure)
        result = await self.transport.run_async(operation)
        return self._finish(result, completion, failure)

    def _run_sync(self, operation: Awaitable[RESTResult], fallback: Any = None) -> Any:
        self._last_result = None
        if self.transport.closed:
            return self._finish(self._rejected(operation, fallback))
        result = self.transport.run_sync(operation)
        return self._finish(result)

    @staticmethod
    def _rejected(operation: Awaitable[RESTResult], fallback: Any) -> RESTResult:
        operation.close()
        logger.error("Вызов через закрытый транспорт")
        return RESTResult(value=fallback, info=[TRANSPORT_CLOSED])

    def _finish(
        self,
        result: RESTResult,
        completion: Optional[Callable[[Any], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
    ) -> Any:
        self._last_result = result
        if result.succeeded:
            if completion is not None:
                completion(result.value)
        else:
            logger.debug(f"Вызов завершился ошибкой: {result.info}")
            if failure is not None:
                failure(result.info[0])
        return result.value

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Операции, возвращающие RESTResult (выполняются в транспорте)
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def _entity_request(
        self,
        url: str,
        method: RequestMethod,
        response_model: Type[T],
        body: Optional[Any] = None,
    ) -> RESTResult[T]:
        response = await self.executor.execute(url, method, body)
        if not response.succeeded:
            return RESTResult.fail(*response.info, status=response.status)
        try:
            return RESTResult.ok(decode_entity(response.value.stream, response_model), status=response.status)
        except RESTDecodeError as e:
            return RESTResult.fail(*e.to_info(), status=response.status)

    async def _list_request(
        self,
        url: str,
        method: RequestMethod,
        response_model: Type[T],
        body: Optional[Any] = None,
    ) -> RESTResult[RESTObjectList[T]]:
        response = await self.executor.execute(url, method, body)
        if not response.succeeded:
            return RESTResult.fail(*response.info, status=response.status)
        try:
            return RESTResult.ok(decode_list(response.value.stream, response_model), status=response.status)
        except RESTDecodeError as e:
            return RESTResult.fail(*e.to_info(), status=response.status)

    async def _get(
        self,
        path: str,
        id: Optional[EntityId],
        response_model: Type[T],
        query: Optional[str],
    ) -> RESTResult[T]:
        url = self.build_url(path, id, query=query)
        return await self._entity_request(url, RequestMethod.GET, response_model)

    async def _list(
        self,
        path: str,
        response_model: Type[T],
        page: Optional[int],
        per_page: Optional[int],
        query: Optional[str],
    ) -> RESTResult[RESTObjectList[T]]:
        url = self.build_url(path, query=build_page_query(query, page, per_page))
        result = await self._list_request(url, RequestMethod.GET, response_model)
        if result.value is None:
            result.value = RESTObjectList[response_model]()
        return result

    async def _query(
        self,
        path: str,
        criteria: Any,
        response_model: Type[T],
        page: Optional[int],
        per_page: Optional[int],
    ) -> RESTResult[RESTObjectList[T]]:
        url = self.build_url(path, "query", query=build_page_query(None, page, per_page))
        return await self._list_request(url, RequestMethod.POST, response_model, criteria)

    async def _post(self, path: str, body: Any, response_model: Type[T]) -> RESTResult[T]:
        url = self.build_url(path)
        return await self._entity_request(url, RequestMethod.POST, response_model, body)

    async def _put(self, path: str, id: EntityId, body: Any, response_model: Type[T]) -> RESTResult[T]:
        url = self.build_url(path, id)
        return await self._entity_request(url, RequestMethod.PUT, response_model, body)

    async def _delete(self, path: str, id: EntityId) -> RESTResult[bool]:
        url = self.build_url(path, id)
        response: RESTResult[RawResponse] = await self.executor.execute(url, RequestMethod.DELETE)
        if not response.succeeded:
            return RESTResult(value=False, info=response.info, status=response.status)
        # Успехом удаления считается только 200, а не любой 2xx
        if response.status != 200:
            return RESTResult(value=False, info=[response.value.status_line], status=response.status)
        return RESTResult.ok(True, status=response.status)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # GET
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def get_async(
        self,
        path: str,
        id: Optional[EntityId] = None,
        *,
        response_model: Type[T],
        query: Optional[str] = None,
        completion: Optional[Callable[[T], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
    ) -> Optional[T]:
        """
        Получает одну сущность: GET <root>/<path>/<id>/.

        Args:
            path: Путь к ресурсу
            id: Идентификатор сущности
            response_model: Модель сущности
            query: Строка запроса
            completion: Вызывается со значением при успехе
            failure: Вызывается с первым сообщением диагностики при ошибке

        Returns:
            Optional[T]: Сущность или None (причина в info)
        """
        return await self._run_async(self._get(path, id, response_model, query), completion, failure)

    def get(
        self,
        path: str,
        id: Optional[EntityId] = None,
        *,
        response_model: Type[T],
        query: Optional[str] = None,
    ) -> Optional[T]:
        """Блокирующий вариант get_async."""
        return self._run_sync(self._get(path, id, response_model, query))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # LIST / QUERY
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def list_async(
        self,
        path: str,
        *,
        response_model: Type[T],
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        query: Optional[str] = None,
        completion: Optional[Callable[[RESTObjectList[T]], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
    ) -> RESTObjectList[T]:
        """
        Получает список сущностей: GET <root>/<path>/?<query>&page=<n>&perPage=<n>.

        Сервер может вернуть голый массив или объект с полем list,
        результат в обоих случаях одинаковый.

        Returns:
            RESTObjectList[T]: Список; при ошибке пустой список (не None)
        """
        operation = self._list(path, response_model, page, per_page, query)
        return await self._run_async(operation, completion, failure, fallback=RESTObjectList[response_model]())

    def list(
        self,
        path: str,
        *,
        response_model: Type[T],
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        query: Optional[str] = None,
    ) -> RESTObjectList[T]:
        """Блокирующий вариант list_async."""
        operation = self._list(path, response_model, page, per_page, query)
        return self._run_sync(operation, fallback=RESTObjectList[response_model]())

    async def query_async(
        self,
        path: str,
        criteria: Any,
        *,
        response_model: Optional[Type[T]] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        completion: Optional[Callable[[RESTObjectList[T]], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
    ) -> Optional[RESTObjectList[T]]:
        """
        Поиск по критериям: POST criteria на <root>/<path>/query/.

        Семантику шаблонов поиска определяет сервер.

        Args:
            path: Путь к ресурсу
            criteria: Модель-образец для поиска
            response_model: Модель сущности (по умолчанию тип criteria)
            page: Номер страницы
            per_page: Размер страницы

        Returns:
            Optional[RESTObjectList[T]]: Список или None при ошибке
        """
        operation = self._query(path, criteria, response_model or type(criteria), page, per_page)
        return await self._run_async(operation, completion, failure)

    def query(
        self,
        path: str,
        criteria: Any,
        *,
        response_model: Optional[Type[T]] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Optional[RESTObjectList[T]]:
        """Блокирующий вариант query_async."""
        return self._run_sync(self._query(path, criteria, response_model or type(criteria), page, per_page))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # POST / PUT / DELETE
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def post_async(
        self,
        path: str,
        body: U,
        *,
        response_model: Optional[Type[T]] = None,
        completion: Optional[Callable[[T], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
    ) -> Optional[T]:
        """
        Создает сущность: POST body на <root>/<path>/.

        Returns:
            Optional[T]: Сущность из ответа сервера или None при ошибке
        """
        operation = self._post(path, body, response_model or type(body))
        return await self._run_async(operation, completion, failure)

    def post(self, path: str, body: U, *, response_model: Optional[Type[T]] = None) -> Optional[T]:
        """Блокирующий вариант post_async."""
        return self._run_sync(self._post(path, body, response_model or type(body)))

    async def put_async(
        self,
        path: str,
        id: EntityId,
        body: U,
        *,
        response_model: Optional[Type[T]] = None,
        completion: Optional[Callable[[T], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
    ) -> Optional[T]:
        """
        Обновляет сущность: PUT body на <root>/<path>/<id>/.

        Returns:
            Optional[T]: Сущность из ответа сервера или None при ошибке
        """
        operation = self._put(path, id, body, response_model or type(body))
        return await self._run_async(operation, completion, failure)

    def put(
        self,
        path: str,
        id: EntityId,
        body: U,
        *,
        response_model: Optional[Type[T]] = None,
    ) -> Optional[T]:
        """Блокирующий вариант put_async."""
        return self._run_sync(self._put(path, id, body, response_model or type(body)))

    async def delete_async(
        self,
        path: str,
        id: EntityId,
        *,
        completion: Optional[Callable[[bool], None]] = None,
        failure: Optional[Callable[[str], None]] = None,
    ) -> bool:
        """
        Удаляет сущность: DELETE <root>/<path>/<id>/.

        Returns:
            bool: True только при ответе 200, иначе False (статус или ошибка в info)
        """
        return await self._run_async(self._delete(path, id), completion, failure, fallback=False)

    def delete(self, path: str, id: EntityId) -> bool:
        """Блокирующий вариант delete_async."""
        return self._run_sync(self._delete(path, id), fallback=False)
