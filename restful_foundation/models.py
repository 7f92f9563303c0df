"""
Модели данных клиента RESTfulFoundation.
"""

import io
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class RESTObject(BaseModel):
    """
    Базовая модель для сущностей, которыми клиент обменивается с API.

    Клиент не навязывает сущности ни идентичность, ни жизненный цикл:
    модель лишь сериализуется в JSON и обратно по алиасам полей.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DynamicObject(RESTObject):
    """Сущность без схемы: сохраняет все поля ответа как есть."""

    model_config = ConfigDict(extra="allow")


class RESTObjectList(BaseModel, Generic[T]):
    """
    Постраничный результат списка.

    Сервер может вернуть либо голый массив сущностей, либо объект-обертку
    с полем list и метаданными пагинации. Обе формы приводятся к этой модели.

    Attributes:
        items: Сущности текущей страницы (в JSON - поле list)
        total_records: Общее количество записей
        page: Номер страницы (с нуля)
        per_page: Размер страницы
        succeeded: Флаг успеха, если сервер его передает
        info: Дополнительные сообщения сервера
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    items: List[T] = Field(default_factory=list, alias="list")
    total_records: Optional[int] = Field(None, alias="totalRecords")
    page: Optional[int] = None
    per_page: Optional[int] = Field(None, alias="perPage")
    succeeded: Optional[bool] = None
    info: Optional[List[str]] = None

    @classmethod
    def from_items(cls, items: Sequence[T]) -> "RESTObjectList[T]":
        """
        Создает список из голого массива сущностей.

        total_records равен длине массива, поля пагинации не заданы.
        """
        items = list(items)
        return cls(items=items, total_records=len(items))

    def __len__(self) -> int:
        return len(self.items)


class RawResponse(BaseModel):
    """
    Успешный ответ сервера до разбора JSON.

    Attributes:
        status: HTTP-статус
        reason: Текстовое описание статуса
        stream: Тело ответа как читаемый поток байтов
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: int
    reason: Optional[str] = None
    stream: io.BytesIO

    @property
    def status_line(self) -> str:
        return f"{self.status} {self.reason}" if self.reason else str(self.status)


class RESTResult(BaseModel, Generic[T]):
    """
    Результат одного вызова: значение или список диагностики.

    Attributes:
        value: Значение при успехе (None при ошибке)
        info: Упорядоченные сообщения о причине ошибки
        status: HTTP-статус, если ответ был получен
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: Optional[T] = None
    info: List[str] = Field(default_factory=list)
    status: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return not self.info

    @classmethod
    def ok(cls, value: Any, status: Optional[int] = None) -> "RESTResult[T]":
        return cls(value=value, status=status)

    @classmethod
    def fail(cls, *info: str, status: Optional[int] = None) -> "RESTResult[T]":
        return cls(info=list(info), status=status)
