from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    Any,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    TypedDict,
    Union,
    runtime_checkable,
)

from pasteur._core._headers import (
    IF_MODIFIED_SINCE,
    IF_NONE_MATCH,
    Headers,
    parse_entity_tags,
)


@runtime_checkable
class Cacheable(Protocol):
    """
    Something that can speak for its own representation.

    Both methods are optional in practice: an object may implement either,
    both, or neither, and a `None` result means it has no opinion.
    """

    def cache_key(self) -> Optional[str]:
        """
        A token unique to the current representation of the object.
        It is hashed to become the ETag of the response.
        """

    def last_modified(self) -> Optional[datetime]:
        """The moment of the last change that affects the representation."""


@dataclass(frozen=True)
class CacheMetadata:
    cache_key: Optional[str] = None
    """Opaque, content-derived token, or None when nothing reported one."""

    last_modified: Optional[datetime] = None
    """The most recent modification time, or None when nothing reported one."""

    @property
    def is_empty(self) -> bool:
        return self.cache_key is None and self.last_modified is None


@dataclass(frozen=True)
class ConditionalRequest:
    """
    The conditional headers of an inbound request, read once at the boundary.

    `if_modified_since` is kept as received; parsing it is left to the
    freshness check so that a malformed value fails the evaluation instead of
    silently disappearing here.
    """

    if_modified_since: Optional[str] = None
    if_none_match: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # keep the instance hashable when a list is passed in
        object.__setattr__(self, "if_none_match", tuple(self.if_none_match))

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "ConditionalRequest":
        if not isinstance(headers, Headers):
            headers = Headers.from_pairs(headers.items())

        if_none_match = headers.get_list(IF_NONE_MATCH) or []
        return cls(
            if_modified_since=headers.get(IF_MODIFIED_SINCE),
            if_none_match=tuple(tag for value in if_none_match for tag in parse_entity_tags(value)),
        )

    @property
    def is_conditional(self) -> bool:
        return self.if_modified_since is not None or bool(self.if_none_match)


@dataclass(frozen=True)
class Fresh:
    """The client's copy is current; answer with 304."""

    by_time: bool = False
    by_etag: bool = False


@dataclass(frozen=True)
class Stale:
    """The client needs the full representation."""


Verdict = Union[Fresh, Stale]


class ResponseMetadata(TypedDict, total=False):
    # All the names here should be prefixed with "pasteur_" to avoid collisions with user data
    pasteur_fresh: bool
    """Indicates whether the request was found fresh and answered without a body."""

    pasteur_fallback: bool
    """Indicates that a malformed timestamp forced the response to be treated as stale."""


@dataclass
class Response:
    status_code: int
    headers: Headers = field(default_factory=Headers)
    content: bytes = b""
    metadata: ResponseMetadata | Mapping[str, Any] = field(default_factory=dict)
