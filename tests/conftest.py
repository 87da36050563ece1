from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import pytest


@dataclass
class Article:
    """A domain object exposing both validators."""

    id: int
    title: str
    key: Optional[str] = None
    updated_at: Optional[datetime] = None

    def cache_key(self) -> Optional[str]:
        return self.key

    def last_modified(self) -> Optional[datetime]:
        return self.updated_at


class KeyOnly:
    def __init__(self, key: Optional[str]) -> None:
        self.key = key

    def cache_key(self) -> Optional[str]:
        return self.key


class TimeOnly:
    def __init__(self, moment: Optional[datetime]) -> None:
        self.moment = moment

    def last_modified(self) -> Optional[datetime]:
        return self.moment


class Opaque:
    """Exposes no validators at all."""


T1 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
T2 = datetime(2024, 1, 2, 12, 0, 0, tzinfo=timezone.utc)
T3 = datetime(2024, 1, 3, 12, 0, 0, tzinfo=timezone.utc)

T3_HTTP_DATE = "Wed, 03 Jan 2024 12:00:00 GMT"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def articles() -> list[Article]:
    return [
        Article(id=1, title="First", key="a", updated_at=T1),
        Article(id=2, title="Second", key="b", updated_at=T2),
        Article(id=3, title="Third", key="c", updated_at=T3),
    ]
