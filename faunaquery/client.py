"""Fauna HTTP client."""

import asyncio
import base64
import json
from datetime import timedelta
from typing import Any, Callable, TypeVar

import httpx

from .exceptions import (
    BadRequest,
    ConfigurationError,
    ConnectionError,
    DatabaseError,
    EmptyResponse,
    NotFound,
    OtherError,
    TimeoutError,
    Unauthorized,
)
from .expr import serialize
from .logging_config import get_logger
from .types import FaunaErrors, Response

DEFAULT_URI = "https://db.fauna.com"
DEFAULT_TIMEOUT = 60.0
API_VERSION = "2.1"

logger = get_logger(__name__)

T = TypeVar("T")


def _parse_response(text: str) -> Response:
    body = json.loads(text)
    if not isinstance(body, dict):
        raise ValueError(f"Expected a JSON object, got {type(body).__name__}")
    return Response.from_response(body)


def decode_response(status: int, body: bytes, decode: Callable[[str], T]) -> T:
    """Map a response status and body to a decoded value or an exception.

    Args:
        status: HTTP status code.
        body: Raw response body.
        decode: Applied to the body text of a 2xx response.

    Returns:
        Whatever ``decode`` returns.

    Raises:
        Unauthorized: On 401, whatever the body.
        BadRequest: On 400 with a well-formed errors body.
        NotFound: On 404 with a well-formed errors body.
        EmptyResponse: On 2xx with no body.
        DatabaseError: On any other status, a body that is not UTF-8, an
            errors body that does not parse, or a 2xx body ``decode``
            rejects with ``ValueError``.
    """
    if status == 401:
        raise Unauthorized()

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise DatabaseError(body.decode("utf-8", errors="replace"), status) from None

    if 200 <= status < 300:
        if not text:
            raise EmptyResponse()
        try:
            return decode(text)
        except ValueError as e:
            raise DatabaseError(text, status) from e

    if status in (400, 404):
        try:
            errors = FaunaErrors.from_response(json.loads(text))
        except ValueError:
            raise DatabaseError(text, status) from None
        if status == 400:
            raise BadRequest(errors)
        raise NotFound(errors)

    raise DatabaseError(text, status)


def _basic_authorization(secret: str) -> str:
    try:
        token = base64.b64encode(f"{secret}:".encode("utf-8")).decode("ascii")
    except UnicodeError as e:
        raise ConfigurationError(f"Secret cannot be encoded: {e}") from e
    return f"Basic {token}"


def _parse_uri(uri: str) -> httpx.URL:
    try:
        url = httpx.URL(uri)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid uri {uri!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid uri {uri!r}: expected an http(s) url with a host")
    return url


class ClientBuilder:
    """Collects settings for a new client.

    Args:
        secret: Key secret used to authenticate every request.

    Example:
        >>> client = Client.builder("my-secret").timeout(5).build()
    """

    def __init__(self, secret: str):
        self._secret = secret
        self._uri = DEFAULT_URI
        self._timeout = DEFAULT_TIMEOUT
        self._transport: httpx.AsyncBaseTransport | None = None

    def uri(self, uri: str) -> "ClientBuilder":
        """Change the uri when using dedicated servers. Default: ``https://db.fauna.com``."""
        self._uri = uri
        return self

    def timeout(self, timeout: float | timedelta) -> "ClientBuilder":
        """Request timeout in seconds. Default: 60."""
        seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)
        if seconds <= 0:
            raise ValueError(f"Timeout must be positive, got {seconds}")
        self._timeout = seconds
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> "ClientBuilder":
        """Use a custom httpx transport instead of the default pooled one."""
        self._transport = transport
        return self

    def build(self) -> "Client":
        """Create the client.

        Raises:
            ConfigurationError: If the transport, uri or secret is unusable.
        """
        uri = _parse_uri(self._uri)
        authorization = _basic_authorization(self._secret)

        try:
            transport = self._transport or httpx.AsyncHTTPTransport()
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot create transport: {e}") from e

        return Client(
            transport=transport,
            uri=uri,
            timeout=self._timeout,
            authorization=authorization,
        )

    def build_sync(self) -> "SyncClient":
        """Create a blocking client."""
        return SyncClient(self.build())


class Client:
    """Async HTTP client for Fauna. Create it with ``Client.builder``.

    A client is safe to share between concurrent queries. Reuse one client
    instead of creating one per request so connections are pooled.

    Example:
        >>> async with Client.builder("my-secret").build() as client:
        ...     response = await client.query(CreateIndex(params))
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        uri: httpx.URL,
        timeout: float,
        authorization: str,
    ):
        self._client = httpx.AsyncClient(transport=transport, timeout=timeout)
        self._uri = uri
        self._timeout = timeout
        self._authorization = authorization

    @classmethod
    def builder(cls, secret: str) -> ClientBuilder:
        """Start building a client authenticated with ``secret``."""
        return ClientBuilder(secret)

    @property
    def uri(self) -> httpx.URL:
        return self._uri

    @property
    def timeout(self) -> float:
        return self._timeout

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def query(self, expr: Any, *, decode: Callable[[str], Any] | None = None) -> Any:
        """Send a query and decode the response.

        Args:
            expr: A query construct, expression or convertible value.
            decode: Applied to the body text of a successful response.
                Defaults to parsing it into a ``Response``.

        Returns:
            A ``Response``, or whatever ``decode`` returns.

        Raises:
            SerializationError: If ``expr`` cannot be serialized.
            ConnectionError: If the server cannot be reached.
            TimeoutError: If the timeout elapses before the body is decoded.
            Unauthorized, BadRequest, NotFound, DatabaseError, EmptyResponse:
                Depending on the response, see ``decode_response``.
        """
        payload = serialize(expr)
        logger.debug("Querying with: %s", payload)

        request = self._build_request(payload)
        return await self._request(request, decode or _parse_response)

    async def _request(self, request: httpx.Request, decode: Callable[[str], T]) -> T:
        try:
            return await asyncio.wait_for(self._send(request, decode), self._timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(f"Request timed out after {self._timeout}s") from None

    async def _send(self, request: httpx.Request, decode: Callable[[str], T]) -> T:
        try:
            response = await self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request timed out: {e}") from e
        except httpx.TransportError as e:
            raise ConnectionError(f"Request failed: {e}") from e
        except httpx.HTTPError as e:
            raise OtherError(f"Request failed: {e}") from e

        logger.debug("Got response status %s", response.status_code)

        try:
            body = await response.aread()
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Reading response timed out: {e}") from e
        except (httpx.TransportError, httpx.StreamError) as e:
            raise ConnectionError(f"Reading response failed: {e}") from e
        except httpx.HTTPError as e:
            raise OtherError(f"Reading response failed: {e}") from e
        finally:
            await response.aclose()

        logger.debug("Got response: %r", body)
        return decode_response(response.status_code, body, decode)

    def _build_request(self, payload: str) -> httpx.Request:
        content = payload.encode("utf-8")
        return self._client.build_request(
            "POST",
            self._uri,
            content=content,
            headers={
                "Content-Type": "application/json",
                "Content-Length": str(len(content)),
                "Authorization": self._authorization,
                "X-FaunaDB-API-Version": API_VERSION,
            },
        )


class SyncClient:
    """Blocking client that runs queries on a private event loop.

    Same interface as Client but blocks until each query completes. Do not
    call it from inside a running event loop.
    """

    def __init__(self, client: Client):
        self._client = client
        self._loop = asyncio.new_event_loop()

    def query(self, expr: Any, *, decode: Callable[[str], Any] | None = None) -> Any:
        """Send a query and wait for the result. See ``Client.query``."""
        return self._loop.run_until_complete(self._client.query(expr, decode=decode))

    def close(self) -> None:
        """Close the HTTP client and the event loop."""
        if self._loop.is_closed():
            return
        try:
            self._loop.run_until_complete(self._client.aclose())
        finally:
            self._loop.close()

    def __enter__(self) -> "SyncClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
