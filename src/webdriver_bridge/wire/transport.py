"""HTTP transport dispatching typed requests in one wire dialect."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from ..errors import RemoteError, TransportFailure
from ..events import EventSink, NullEventSink
from ..models import Dialect, EventLevel
from .dialects import codec_for
from .requests import Request

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class WireTransport:
    """Send requests to a driver endpoint and decode its responses.

    The dialect is fixed at construction and never negotiated. Remote
    failures surface as :class:`RemoteError`; connection problems and
    undecodable bodies as :class:`TransportFailure`. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        dialect: Dialect,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        events: Optional[EventSink] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._dialect = Dialect(dialect)
        self._codec = codec_for(self._dialect)
        self._events = events or NullEventSink()
        self._closed = False
        request_headers = {
            "Accept": "application/json",
            "Content-Type": "application/json;charset=UTF-8",
        }
        request_headers.update(headers or {})
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout,
            headers=request_headers,
            transport=transport,
        )

    def __enter__(self) -> "WireTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True
        self._client.close()

    def send(self, request: Request, *, timeout: Optional[float] = None) -> Any:
        """Send ``request`` and return its parsed value.

        ``timeout`` overrides the transport timeout for this request only.
        """

        if self._closed:
            raise TransportFailure(f"Transport to {self._base_url} is closed", url=self._base_url)
        method = request.method.value
        path = "/" + "/".join(quote(part, safe="") for part in request.path_components(self._dialect))
        body = request.body(self._dialect)
        LOGGER.debug("%s %s%s", method, self._base_url, path)
        self._events.record(
            "request_sent",
            f"{method} {path}",
            level=EventLevel.DEBUG,
            request=type(request).__name__,
            dialect=self._dialect.value,
        )
        try:
            response = self._client.request(
                method,
                path,
                json=body,
                timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
            )
        except httpx.HTTPError as exc:
            raise self._failed(request, TransportFailure(f"{method} {path} failed: {exc}", url=path)) from exc

        try:
            payload = _decode_json(response)
        except ValueError as exc:
            if response.is_success:
                raise self._failed(
                    request, TransportFailure(f"Malformed response body: {exc}", url=path)
                ) from exc
            payload = None

        try:
            reply = self._codec.unwrap(response.status_code, payload)
        except (RemoteError, TransportFailure) as exc:
            self._failed(request, exc)
            raise

        try:
            return request.parse_response(reply, self._dialect)
        except ValueError as exc:
            raise self._failed(
                request,
                TransportFailure(f"Unexpected {type(request).__name__} response: {exc}", url=path),
            ) from exc

    def _failed(self, request: Request, error: Exception) -> Exception:
        LOGGER.debug("%s failed: %s", type(request).__name__, error)
        self._events.record(
            "request_failed",
            str(error),
            level=EventLevel.WARNING,
            request=type(request).__name__,
            error=type(error).__name__,
        )
        return error


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    return response.json()
