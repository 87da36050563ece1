from __future__ import annotations

import logging
import typing as tp

from typing_extensions import assert_never

from pasteur._core._aggregate import collect_metadata
from pasteur._core._headers import CONTENT_LENGTH, CONTENT_TYPE, ETAG, LAST_MODIFIED, Headers
from pasteur._core._spec import NegotiationOptions, evaluate
from pasteur._core.models import CacheMetadata, ConditionalRequest, Fresh, Response, Stale, Verdict
from pasteur._exceptions import MalformedTimestamp
from pasteur._utils import coerce_timestamp, format_http_date

logger = logging.getLogger("pasteur.coordinator")

Serialize = tp.Callable[[tp.Any], tp.Union[bytes, str]]

__all__ = ("ResponseCoordinator",)


class ResponseCoordinator:
    """
    Renders an object as either 304 Not Modified or 200 with a full body.

    The coordinator aggregates the validators of the object, writes them as
    `Last-Modified` and `ETag`, and asks the freshness evaluator whether the
    client already holds the representation. The body is serialized only when
    it is actually sent.

    Args:
        options: How validators are computed and formatted. Defaults to
            NegotiationOptions().

    Example:
        ```python
        from pasteur import ConditionalRequest, ResponseCoordinator, json_serializer

        coordinator = ResponseCoordinator()
        response = coordinator.respond(
            article,
            serialize=json_serializer,
            mime_type="application/json",
            conditional=ConditionalRequest.from_headers(request_headers),
        )
        ```
    """

    def __init__(self, options: tp.Optional[NegotiationOptions] = None) -> None:
        self._options = options if options is not None else NegotiationOptions()

    @property
    def options(self) -> NegotiationOptions:
        return self._options

    def cache_headers(self, metadata: CacheMetadata) -> Headers:
        headers = Headers()
        if metadata.last_modified is not None:
            headers[LAST_MODIFIED] = format_http_date(coerce_timestamp(metadata.last_modified, "Last-Modified"))
        if metadata.cache_key is not None:
            headers[ETAG] = self._options.make_etag(metadata.cache_key)
        return headers

    def respond(
        self,
        obj: tp.Any,
        serialize: Serialize,
        mime_type: str,
        conditional: tp.Union[ConditionalRequest, tp.Mapping[str, str]],
    ) -> Response:
        """
        Builds the response for `obj`.

        Raises:
            MalformedTimestamp: If-Modified-Since or a stored modification
                time is not a date. Use `respond_or_fallback` to serve the
                full body instead.
        """
        headers, verdict = self._negotiate(obj, conditional)
        return self._render(obj, serialize, mime_type, headers, verdict)

    def respond_or_fallback(
        self,
        obj: tp.Any,
        serialize: Serialize,
        mime_type: str,
        conditional: tp.Union[ConditionalRequest, tp.Mapping[str, str]],
    ) -> Response:
        """
        Like `respond`, but a malformed timestamp makes the request stale.

        Only reading the validators and the conditional headers is guarded;
        whatever `serialize` raises propagates unchanged and it is never
        called twice. The framework adapters in this package all go through
        this method.
        """
        try:
            headers, verdict = self._negotiate(obj, conditional)
        except MalformedTimestamp as exc:
            logger.warning("Treating the request as stale: %s", exc)
        else:
            return self._render(obj, serialize, mime_type, headers, verdict)

        response = self._full_response(obj, serialize, mime_type, self._fallback_headers(obj))
        response.metadata = {"pasteur_fresh": False, "pasteur_fallback": True}
        return response

    def _negotiate(
        self,
        obj: tp.Any,
        conditional: tp.Union[ConditionalRequest, tp.Mapping[str, str]],
    ) -> tp.Tuple[Headers, Verdict]:
        if not isinstance(conditional, ConditionalRequest):
            conditional = ConditionalRequest.from_headers(conditional)

        metadata = collect_metadata(obj, self._options.describe, self._options.separator)
        headers = self.cache_headers(metadata)
        return headers, evaluate(conditional, metadata, self._options.make_etag)

    def _render(
        self,
        obj: tp.Any,
        serialize: Serialize,
        mime_type: str,
        headers: Headers,
        verdict: Verdict,
    ) -> Response:
        if isinstance(verdict, Fresh):
            logger.debug("Responding with 304 Not Modified: headers=%s", headers)
            return Response(status_code=304, headers=headers, content=b"", metadata={"pasteur_fresh": True})
        elif isinstance(verdict, Stale):
            return self._full_response(obj, serialize, mime_type, headers)
        else:
            assert_never(verdict)

    def _fallback_headers(self, obj: tp.Any) -> Headers:
        try:
            return self.cache_headers(collect_metadata(obj, self._options.describe, self._options.separator))
        except MalformedTimestamp:
            # the stored time itself is broken, so no validators can be trusted
            return Headers()

    def _full_response(self, obj: tp.Any, serialize: Serialize, mime_type: str, headers: Headers) -> Response:
        body = serialize(obj)
        if isinstance(body, str):
            body = body.encode("utf-8")

        headers[CONTENT_TYPE] = mime_type
        headers[CONTENT_LENGTH] = str(len(body))
        logger.debug("Responding with 200 OK: content_type=%s content_length=%d", mime_type, len(body))
        return Response(status_code=200, headers=headers, content=body, metadata={"pasteur_fresh": False})
