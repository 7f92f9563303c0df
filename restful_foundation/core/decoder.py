"""
Разбор JSON-ответов, которые могут быть как массивом, так и объектом-оберткой.

Форма ответа определяется по первому структурному токену, а не перебором
вариантов через исключения.
"""

import json
import logging
from typing import IO, List, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from ..exceptions import RESTDecodeError
from ..models import RESTObjectList
from .enums import JsonShape


logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_DECODING_ERROR = "Unable to decode result"
NO_LIST_RETURNED = "No List Returned"
LIST_DECODING_ERROR = "Unable to process a list from the result"

_WHITESPACE = b" \t\r\n"
_BOM = b"\xef\xbb\xbf"


def _read(source: Union[IO[bytes], bytes, str]) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, str):
        return source.encode("utf-8")
    data = source.read()
    return data.encode("utf-8") if isinstance(data, str) else data


def peek_structure(payload: bytes) -> JsonShape:
    """
    Определяет форму JSON по первому значащему символу.

    Args:
        payload: Тело ответа

    Returns:
        JsonShape: ARRAY для "[", OBJECT для "{", EMPTY для пустого тела,
                   SCALAR для всего остального
    """
    if payload.startswith(_BOM):
        payload = payload[len(_BOM) :]
    stripped = payload.lstrip(_WHITESPACE)
    if not stripped:
        return JsonShape.EMPTY
    first = stripped[:1]
    if first == b"[":
        return JsonShape.ARRAY
    if first == b"{":
        return JsonShape.OBJECT
    return JsonShape.SCALAR


def _strip_bom(payload: bytes) -> bytes:
    return payload[len(_BOM) :] if payload.startswith(_BOM) else payload


def decode_list(source: Union[IO[bytes], bytes, str], model: Type[T]) -> RESTObjectList[T]:
    """
    Разбирает список сущностей из голого массива или объекта с полем list.

    Args:
        source: Поток или тело ответа
        model: Модель сущности

    Returns:
        RESTObjectList[T]: Нормализованный список

    Raises:
        RESTDecodeError: Если в ответе нет списка или он не соответствует модели
    """
    payload = _strip_bom(_read(source))
    shape = peek_structure(payload)

    try:
        if shape is JsonShape.ARRAY:
            items = TypeAdapter(List[model]).validate_json(payload)
            return RESTObjectList[model].from_items(items)
        if shape is JsonShape.OBJECT:
            return RESTObjectList[model].model_validate_json(payload)
    except ValidationError as e:
        logger.error(f"Ошибка разбора списка {model.__name__}: {e}")
        raise RESTDecodeError(LIST_DECODING_ERROR, details=e.errors()) from e

    logger.error(f"Ответ не содержит списка (форма: {shape.value})")
    raise RESTDecodeError(NO_LIST_RETURNED)


def decode_entity(source: Union[IO[bytes], bytes, str], model: Type[T]) -> T:
    """
    Разбирает одну сущность.

    Raises:
        RESTDecodeError: Если тело пустое, равно null или не соответствует модели
    """
    payload = _strip_bom(_read(source))

    try:
        result = TypeAdapter(model).validate_json(payload) if payload.strip() else None
    except (ValidationError, json.JSONDecodeError) as e:
        logger.error(f"Ошибка разбора {getattr(model, '__name__', model)}: {e}")
        raise RESTDecodeError(JSON_DECODING_ERROR, details=str(e)) from e

    if result is None:
        raise RESTDecodeError(JSON_DECODING_ERROR)
    return result
