from __future__ import annotations

import logging
import typing as t

from pasteur._coordinator import ResponseCoordinator, Serialize
from pasteur._core._headers import Headers
from pasteur._core._spec import NegotiationOptions
from pasteur._core.models import ConditionalRequest, Response
from pasteur._serializers import JSON_MIME_TYPE, json_serializer
from pasteur._utils import HEADERS_ENCODING

# Configure logger for this module
logger = logging.getLogger(__name__)


class _ASGIScope(t.TypedDict, total=False):
    """The keys of an ASGI HTTP scope read by this module."""

    type: str
    method: str
    path: str
    headers: list[tuple[bytes, bytes]]


_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]
_Resolve = t.Callable[[_ASGIScope], t.Any]


def conditional_from_scope(scope: _ASGIScope) -> ConditionalRequest:
    """Read the conditional headers of an ASGI HTTP scope."""
    headers = Headers.from_pairs(
        (key.decode(HEADERS_ENCODING), value.decode(HEADERS_ENCODING)) for key, value in scope.get("headers", [])
    )
    return ConditionalRequest.from_headers(headers)


async def send_response(response: Response, send: _Send) -> None:
    """
    Send a Response through the ASGI send callable.

    Args:
        response: The response built by the coordinator.
        send: The ASGI send callable.
    """
    headers: list[tuple[bytes, bytes]] = [
        (key.lower().encode(HEADERS_ENCODING), value.encode(HEADERS_ENCODING)) for key, value in response.headers.raw()
    ]

    await send(
        {
            "type": "http.response.start",
            "status": response.status_code,
            "headers": headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": response.content,
            "more_body": False,
        }
    )
    logger.debug(
        "Response sent: status=%d total_bytes=%d",
        response.status_code,
        len(response.content),
    )


class ConditionalASGIApp:
    """
    ASGI application that answers conditional GET requests for one resource.

    For every request `resolve` is called with the scope to obtain the object
    to render. The object's validators are compared with the request's
    If-Modified-Since and If-None-Match headers; a fresh request gets an empty
    304 and a stale one the serialized body.

    A malformed If-Modified-Since never fails the request: it is served as if
    it were unconditional.

    Args:
        resolve: Returns the object (or list of objects) for a scope.
        serialize: Turns the object into the response body. Defaults to
            `json_serializer`.
        mime_type: Content-Type of the body. Defaults to application/json.
        options: Validator settings. Defaults to NegotiationOptions().

    Example:
        ```python
        from pasteur.asgi import ConditionalASGIApp

        app = ConditionalASGIApp(resolve=lambda scope: load_articles())
        ```
    """

    def __init__(
        self,
        resolve: _Resolve,
        serialize: Serialize = json_serializer,
        mime_type: str = JSON_MIME_TYPE,
        options: NegotiationOptions | None = None,
    ) -> None:
        self._resolve = resolve
        self._serialize = serialize
        self._mime_type = mime_type
        self._coordinator = ResponseCoordinator(options)

        logger.info(
            "Initialized ConditionalASGIApp with mime_type=%s, etag_generator=%s",
            mime_type,
            getattr(self._coordinator.options.etag_generator, "__name__", self._coordinator.options.etag_generator),
        )

    async def __call__(self, scope: _ASGIScope, receive: _Receive, send: _Send) -> None:
        # Only handle HTTP requests
        if scope["type"] != "http":
            logger.debug("Skipping non-HTTP request: type=%s", scope["type"])
            return

        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "/")
        logger.debug("Incoming HTTP request: method=%s path=%s", method, path)

        try:
            obj = self._resolve(scope)
            response = self._coordinator.respond_or_fallback(
                obj,
                serialize=self._serialize,
                mime_type=self._mime_type,
                conditional=conditional_from_scope(scope),
            )
        except Exception as e:
            logger.error(
                "Error processing request: method=%s path=%s error=%s",
                method,
                path,
                str(e),
                exc_info=True,
            )
            raise

        if method == "HEAD":
            response.content = b""

        logger.info(
            "Request processed: method=%s path=%s status=%d",
            method,
            path,
            response.status_code,
        )
        await send_response(response, send)
