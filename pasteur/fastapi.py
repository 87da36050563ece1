from __future__ import annotations

import logging
import typing as t

from pasteur._coordinator import ResponseCoordinator, Serialize
from pasteur._core._spec import NegotiationOptions
from pasteur._core.models import ConditionalRequest
from pasteur._serializers import JSON_MIME_TYPE, json_serializer

try:
    import fastapi
except ImportError as e:
    raise ImportError(
        "fastapi is required to use pasteur.fastapi module. "
        "Please install pasteur with the 'fastapi' extra, "
        "e.g., 'pip install pasteur[fastapi]'."
    ) from e

logger = logging.getLogger(__name__)


def conditional_request(request: fastapi.Request) -> ConditionalRequest:
    """
    Dependency that reads the conditional headers of the current request.

    Examples:
        >>> from fastapi import Depends, FastAPI
        >>> from pasteur import ConditionalRequest
        >>> from pasteur.fastapi import conditional_request
        >>>
        >>> app = FastAPI()
        >>>
        >>> @app.get("/articles/{article_id}")
        >>> async def get_article(
        ...     article_id: int,
        ...     conditional: ConditionalRequest = Depends(conditional_request),
        ... ):
        ...     ...
    """
    return ConditionalRequest.from_headers(request.headers)


def render(
    request: fastapi.Request,
    obj: t.Any,
    *,
    serialize: Serialize = json_serializer,
    mime_type: str = JSON_MIME_TYPE,
    options: NegotiationOptions | None = None,
) -> fastapi.Response:
    """
    Render an object for a FastAPI endpoint, honouring conditional requests.

    Sets `Last-Modified` and `ETag` from the object's validators and returns an
    empty 304 response when the client's copy is current. Otherwise the object
    is serialized and returned with `Content-Type` and `Content-Length`.

    A malformed If-Modified-Since header is logged and the full body is sent.

    Args:
        request: The incoming request.
        obj: The object, or list of objects, to render.
        serialize: Turns the object into bytes. Defaults to `json_serializer`.
        mime_type: Content-Type of the body. Defaults to application/json.
        options: Validator settings. Defaults to NegotiationOptions().

    Returns:
        A `fastapi.Response` with status 200 or 304.

    Examples:
        >>> from fastapi import FastAPI, Request
        >>> from pasteur.fastapi import render
        >>>
        >>> app = FastAPI()
        >>>
        >>> @app.get("/articles")
        >>> async def list_articles(request: Request):
        ...     return render(request, load_articles())
    """
    response = ResponseCoordinator(options).respond_or_fallback(
        obj,
        serialize=serialize,
        mime_type=mime_type,
        conditional=conditional_request(request),
    )
    logger.debug("Rendered %s %s with status %d", request.method, request.url.path, response.status_code)

    return fastapi.Response(
        content=response.content,
        status_code=response.status_code,
        headers=dict(response.headers.items()),
    )
