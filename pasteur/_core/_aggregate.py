from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from pasteur._core.models import CacheMetadata
from pasteur._utils import coerce_timestamp

logger = logging.getLogger("pasteur.core.aggregate")

KEY_SEPARATOR = "-"

Describe = Callable[[Any], CacheMetadata]


def describe_entity(entity: Any) -> CacheMetadata:
    """
    Read the cache metadata an entity exposes.

    `CacheMetadata` values are returned as they are. Otherwise `cache_key()` and
    `last_modified()` are looked up independently; a missing method or a `None`
    result leaves the corresponding field absent.

    Parameters:
    ----------
    entity : Any
        A domain object, an `EntityList`, or a ready-made `CacheMetadata`.

    Returns:
    -------
    CacheMetadata
        The entity's own opinion, never a fabricated one.

    Examples:
    --------
    >>> class Article:
    ...     def cache_key(self):
    ...         return "article-1"
    >>> describe_entity(Article())
    CacheMetadata(cache_key='article-1', last_modified=None)
    >>> describe_entity(object())
    CacheMetadata(cache_key=None, last_modified=None)
    """
    if isinstance(entity, CacheMetadata):
        return entity

    cache_key = getattr(entity, "cache_key", None)
    last_modified = getattr(entity, "last_modified", None)

    return CacheMetadata(
        cache_key=cache_key() if callable(cache_key) else None,
        last_modified=last_modified() if callable(last_modified) else None,
    )


def _describe_all(entities: Iterable[Any], describe: Describe, separator: str) -> List[CacheMetadata]:
    # nested lists follow the caller's describe and separator, not their own
    return [
        aggregate(entity, describe, separator) if isinstance(entity, EntityList) else describe(entity)
        for entity in entities
    ]


def aggregate_key(
    entities: Iterable[Any],
    describe: Describe = describe_entity,
    separator: str = KEY_SEPARATOR,
) -> Optional[str]:
    """
    Join the cache keys of the entities, in the order given.

    Absent keys are skipped. The result is order sensitive: the
    same members in a different order are a different representation.
    Nested `EntityList` members are joined with this separator too.
    """
    keys = [
        metadata.cache_key
        for metadata in _describe_all(entities, describe, separator)
        if metadata.cache_key is not None
    ]
    if not keys:
        return None
    return separator.join(keys)


def aggregate_last_modified(
    entities: Iterable[Any],
    describe: Describe = describe_entity,
) -> Optional[datetime]:
    """The most recent modification time among the entities, if any reported one."""
    moments = [
        coerce_timestamp(metadata.last_modified, "Last-Modified")
        for metadata in _describe_all(entities, describe, KEY_SEPARATOR)
        if metadata.last_modified is not None
    ]
    return max(moments) if moments else None


def aggregate(
    entities: Iterable[Any],
    describe: Describe = describe_entity,
    separator: str = KEY_SEPARATOR,
) -> CacheMetadata:
    # describe every entity once, then fold both fields
    described = _describe_all(entities, describe, separator)
    metadata = CacheMetadata(
        cache_key=aggregate_key(described, separator=separator),
        last_modified=aggregate_last_modified(described),
    )
    logger.debug(
        "Aggregated cache metadata from %d entities: cache_key=%r last_modified=%s",
        len(described),
        metadata.cache_key,
        metadata.last_modified,
    )
    return metadata


class EntityList(Sequence[Any]):
    """
    An ordered group of entities that is itself cacheable.

    Its cache key is the joined keys of its members and its modification time
    the latest of theirs, so a list can be nested inside another list.

    When a list is nested inside another collection, its members are read
    with the outer describe and separator; its own settings apply only when
    `cache_key()` and `last_modified()` are called on it directly.
    """

    def __init__(
        self,
        entities: Iterable[Any],
        describe: Describe = describe_entity,
        separator: str = KEY_SEPARATOR,
    ) -> None:
        self._entities: Tuple[Any, ...] = tuple(entities)
        self._describe = describe
        self._separator = separator

    def cache_key(self) -> Optional[str]:
        return aggregate_key(self._entities, self._describe, self._separator)

    def last_modified(self) -> Optional[datetime]:
        return aggregate_last_modified(self._entities, self._describe)

    def __getitem__(self, index: Any) -> Any:
        return self._entities[index]

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._entities)

    def __repr__(self) -> str:
        return f"EntityList({list(self._entities)!r})"


def collect_metadata(
    obj: Any,
    describe: Describe = describe_entity,
    separator: str = KEY_SEPARATOR,
) -> CacheMetadata:
    """
    Cache metadata for whatever a handler wants to render.

    Lists, tuples and `EntityList` values are aggregated member by member; any
    other object is the degenerate one-element collection.
    """
    if isinstance(obj, (list, tuple, EntityList)):
        return aggregate(obj, describe, separator)
    return aggregate([obj], describe, separator)
