"""
Перечисления клиента RESTfulFoundation.
"""

from enum import Enum


class RequestMethod(str, Enum):
    """HTTP-методы, которые умеет отправлять RequestExecutor."""

    GET = "GET"
    """Чтение сущности или списка."""

    PUT = "PUT"
    """Обновление сущности. Требует тело запроса."""

    POST = "POST"
    """Создание сущности или поисковый запрос. Требует тело запроса."""

    DELETE = "DELETE"
    """Удаление сущности."""

    @property
    def requires_body(self) -> bool:
        """Нужно ли методу непустое тело запроса."""
        return self in (RequestMethod.PUT, RequestMethod.POST)


class JsonShape(str, Enum):
    """Структура верхнего уровня JSON-ответа, определяемая по первому токену."""

    ARRAY = "array"
    OBJECT = "object"
    SCALAR = "scalar"
    EMPTY = "empty"
