"""
Утилиты клиента RESTfulFoundation.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

from pydantic import BaseModel


class CustomJSONEncoder(json.JSONEncoder):
    """
    Кастомный JSON-энкодер для сериализации UUID, дат, Decimal и pydantic-моделей.
    """

    def default(self, obj):
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json", by_alias=True, exclude_none=True)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


def serialize_body(body: Any) -> bytes:
    """
    Сериализует тело запроса в UTF-8 JSON.

    Pydantic-модели выгружаются по алиасам, пустые (None) поля опускаются.

    Args:
        body: Модель, словарь, список или скаляр

    Returns:
        bytes: JSON в кодировке UTF-8
    """
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(body, cls=CustomJSONEncoder, ensure_ascii=False).encode("utf-8")


def build_url_string(*parts: Optional[Union[str, int]], query: Optional[str] = None) -> str:
    """
    Собирает URL из частей пути и строки запроса.

    Части присоединяются через ровно один "/": повторные, ведущие и
    завершающие "/" частей отбрасываются, пустые части пропускаются. У корня
    (первой части) отбрасываются только завершающие "/", схема "//" остается.
    Результат всегда заканчивается одним "/" перед строкой запроса. Несколько
    параметров запроса вызывающий код объединяет через "&" сам.

    Args:
        *parts: Части пути, начиная с корня API
        query: Строка запроса без ведущего "?"

    Returns:
        str: Собранный URL

    Example:
        >>> build_url_string("https://x/", "/api/controller/", "", "12")
        'https://x/api/controller/12/'
    """
    result = ""
    for index, part in enumerate(parts):
        part = "" if part is None else str(part)
        if not part:
            continue
        if index == 0:
            result = part.rstrip("/") + "/"
            continue
        segment = "/".join(piece for piece in part.split("/") if piece)
        if segment:
            result += segment + "/"

    if not result.endswith("/"):
        result += "/"

    if query:
        result += f"?{query[1:] if query.startswith('?') else query}"

    return result


def build_page_query(
    query: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> str:
    """
    Добавляет параметры пагинации к строке запроса.

    Args:
        query: Исходная строка запроса
        page: Номер страницы
        per_page: Размер страницы

    Returns:
        str: Строка вида "<query>&page=<n>&perPage=<n>"
    """
    params = [query] if query else []
    if page is not None:
        params.append(f"page={page}")
    if per_page is not None:
        params.append(f"perPage={per_page}")
    return "&".join(params)
