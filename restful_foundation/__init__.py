"""
Типизированный REST-клиент RESTfulFoundation.
"""

from . import models
from .cli import cli
from .config import RESTConfig
from .core import RequestMethod, RESTConnection, TransportClient
from .exceptions import (
    RESTConstructionError,
    RESTDecodeError,
    RESTError,
    RESTHttpStatusError,
    RESTTransportError,
)
from .models import DynamicObject, RESTObject, RESTObjectList, RESTResult
from .utils import build_page_query, build_url_string


__all__ = [
    "DynamicObject",
    "RESTConfig",
    "RESTConnection",
    "RESTConstructionError",
    "RESTDecodeError",
    "RESTError",
    "RESTHttpStatusError",
    "RESTObject",
    "RESTObjectList",
    "RESTResult",
    "RESTTransportError",
    "RequestMethod",
    "TransportClient",
    "build_page_query",
    "build_url_string",
    "cli",
    "models",
]

__version__ = "0.1.0"
