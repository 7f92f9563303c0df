"""
Основные компоненты клиента RESTfulFoundation.
Этот пакет содержит транспорт, исполнитель запросов, разбор ответов и соединение.
"""

from .connection import RESTConnection
from .decoder import decode_entity, decode_list, peek_structure
from .enums import JsonShape, RequestMethod
from .executor import RequestExecutor
from .transport import TransportClient


__all__ = [
    "JsonShape",
    "RESTConnection",
    "RequestExecutor",
    "RequestMethod",
    "TransportClient",
    "decode_entity",
    "decode_list",
    "peek_structure",
]
