"""
Модуль с исключениями клиента RESTfulFoundation.

Исключения не покидают публичные операции RESTConnection: они перехватываются
на границе фасада и превращаются в строки диагностики (info).
"""

from typing import Any, List, Optional


ADDITIONAL_INFORMATION = "Additional Information: {message}"


class RESTError(Exception):
    """
    Базовый класс для всех исключений клиента.
    """

    def __init__(self, message: str, details: Any = None):
        """
        Инициализирует исключение.

        Args:
            message: Сообщение об ошибке
            details: Дополнительные детали ошибки
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def to_info(self) -> List[str]:
        """
        Возвращает строки диагностики для этого исключения.

        Returns:
            List[str]: Упорядоченный список сообщений
        """
        return [self.message]


class RESTConstructionError(RESTError):
    """
    Запрос не может быть сформирован: PUT/POST без тела или тело, которое нельзя сериализовать в JSON.
    """

    pass


class RESTTransportError(RESTError):
    """Сетевая ошибка: DNS, таймаут, отказ в соединении, битый ответ."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message, details=cause)

    def to_info(self) -> List[str]:
        info = [self.message]
        if self.cause is not None:
            info.append(ADDITIONAL_INFORMATION.format(message=describe_exception(self.cause)))
        return info


class RESTHttpStatusError(RESTError):
    """Сервер ответил статусом вне диапазона 2xx."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        self.status_code = status_code
        super().__init__(message, details)


class RESTDecodeError(RESTError):
    """Тело ответа получено, но не разбирается в ожидаемую форму."""

    pass


def describe_exception(error: BaseException) -> str:
    """
    Возвращает читаемое сообщение исключения.

    У некоторых исключений (например, asyncio.TimeoutError) str() пустой,
    тогда используется имя класса.
    """
    message = str(error)
    return message if message else type(error).__name__
