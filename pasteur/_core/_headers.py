from __future__ import annotations

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    Union,
)

IF_MODIFIED_SINCE = "If-Modified-Since"
IF_NONE_MATCH = "If-None-Match"
LAST_MODIFIED = "Last-Modified"
ETAG = "ETag"
CONTENT_TYPE = "Content-Type"
CONTENT_LENGTH = "Content-Length"

WILDCARD = "*"


class Headers(MutableMapping[str, str]):
    """
    Case-insensitive header mapping that remembers the casing a field was written with.

    Lookups ignore case; iteration yields names as they were first set, so
    `Headers({"etag": ...})["ETag"]` works while `list(Headers({"ETag": ...}))`
    gives back `["ETag"]`.
    """

    def __init__(self, headers: Optional[Mapping[str, Union[str, List[str]]]] = None) -> None:
        self._headers: Dict[str, Tuple[str, List[str]]] = {}
        for key, value in (headers or {}).items():
            self._headers[key.lower()] = (key, [value] if isinstance(value, str) else value[:])

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "Headers":
        headers = cls()
        for key, value in pairs:
            headers.add(key, value)
        return headers

    def get_list(self, key: str) -> Optional[List[str]]:
        entry = self._headers.get(key.lower(), None)
        return None if entry is None else entry[1]

    def add(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), (key, []))[1].append(value)

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()][1])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers[key.lower()] = (key, [value])

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._headers.values())

    def __len__(self) -> int:
        return len(self._headers)

    def raw(self) -> List[Tuple[str, str]]:
        return [(name, value) for name, values in self._headers.values() for value in values]

    def __repr__(self) -> str:
        return f"Headers({self.raw()!r})"

    def __eq__(self, other_headers: Any) -> bool:
        if not isinstance(other_headers, Headers):
            return False
        return {k: v[1] for k, v in self._headers.items()} == {k: v[1] for k, v in other_headers._headers.items()}


def parse_entity_tags(value: Optional[str]) -> List[str]:
    """
    Split an If-None-Match value into its entity tags.

    Tokens are trimmed and blank ones dropped, so a missing or empty header
    gives an empty list rather than `[""]`.

    Examples:
        >>> parse_entity_tags('"abc", "def"')
        ['"abc"', '"def"']
        >>> parse_entity_tags("*")
        ['*']
        >>> parse_entity_tags("")
        []
    """
    if not value:
        return []

    tags = []
    for tag in value.split(","):
        tag = tag.strip()
        if tag:
            tags.append(tag)
    return tags


def format_entity_tag(opaque: str, *, quote: bool = True, weak: bool = False) -> str:
    """
    Wrap a raw validator as it goes on the wire.

    Examples:
        >>> format_entity_tag("abc")
        '"abc"'
        >>> format_entity_tag("abc", weak=True)
        'W/"abc"'
        >>> format_entity_tag("abc", quote=False)
        'abc'
    """
    tag = f'"{opaque}"' if quote else opaque
    return f"W/{tag}" if weak else tag
