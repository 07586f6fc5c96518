"""Fauna Python Client.

A typed client for Fauna: build query expressions, send them over HTTPS
and get typed results or typed errors back.

Usage:
    from faunaquery import Client, CreateIndex, IndexParams, Ref, Term

    client = Client.builder("my-secret").build()

    params = IndexParams("cats_by_age", Ref.class_("cats"))
    params.terms([Term.field(["data", "age"])])

    response = await client.query(CreateIndex(params))
"""

from .client import Client, ClientBuilder, SyncClient
from .exceptions import (
    BadRequest,
    ConfigurationError,
    ConnectionError,
    DatabaseError,
    EmptyResponse,
    FaunaError,
    NotFound,
    OtherError,
    SerializationError,
    TimeoutError,
    Unauthorized,
)
from .expr import Array, Expr, IndexPermission, Level, Literal, Object, Query, Ref
from .logging_config import get_logger, setup_logging
from .query import (
    ClassParams,
    CreateClass,
    CreateDatabase,
    CreateIndex,
    Delete,
    Get,
    IndexParams,
    IndexValue,
    Term,
)
from .types import FaunaErrorDetail, FaunaErrors, Response

__version__ = "0.1.0"
__all__ = [
    "Client",
    "ClientBuilder",
    "SyncClient",
    "FaunaError",
    "ConnectionError",
    "TimeoutError",
    "Unauthorized",
    "BadRequest",
    "NotFound",
    "DatabaseError",
    "EmptyResponse",
    "OtherError",
    "ConfigurationError",
    "SerializationError",
    "Expr",
    "Literal",
    "Array",
    "Object",
    "Ref",
    "Query",
    "Level",
    "IndexPermission",
    "IndexParams",
    "Term",
    "IndexValue",
    "ClassParams",
    "CreateIndex",
    "CreateClass",
    "CreateDatabase",
    "Get",
    "Delete",
    "Response",
    "FaunaErrors",
    "FaunaErrorDetail",
    "get_logger",
    "setup_logging",
]
