from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger("pasteur.keygen")


class EtagGenerator(ABC):
    """Turns an aggregated cache key into the opaque part of an ETag."""

    @abstractmethod
    def __call__(self, cache_key: str) -> str: ...


class HashEtagGenerator(EtagGenerator):
    def __init__(self, algorithm: str) -> None:
        # raises ValueError for unknown algorithms
        hashlib.new(algorithm)
        self.algorithm = algorithm

    def __call__(self, cache_key: str) -> str:
        hasher = hashlib.new(self.algorithm)
        hasher.update(cache_key.encode("utf-8"))
        return hasher.hexdigest()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.algorithm!r})"


def md5_etag(cache_key: str) -> str:
    """
    The default ETag: the MD5 hex digest of the cache key.

    FIPS-enabled interpreters refuse MD5 outright; SHA-256 is used there
    instead, which still yields a stable validator for a given key.
    """
    data = cache_key.encode("utf-8")
    try:
        return hashlib.md5(data, usedforsecurity=False).hexdigest()
    except ValueError:
        logger.debug("MD5 is not available, falling back to SHA-256 for ETag generation.")
        return hashlib.sha256(data).hexdigest()
