from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import pytest

from pycardata.exceptions import StoreError


@dataclass
class FailingStore:
    """Store double whose every operation fails like an unavailable disk."""

    calls: list[str] = field(default_factory=list)

    async def get(self, key: str) -> bytes | None:
        self.calls.append(f"get:{key}")
        raise StoreError("store offline", key=key)

    async def set(self, key: str, value: bytes) -> None:
        self.calls.append(f"set:{key}")
        raise StoreError("store offline", key=key)

    async def remove(self, key: str) -> None:
        self.calls.append(f"remove:{key}")
        raise StoreError("store offline", key=key)

    async def remove_many(self, keys: Iterable[str]) -> None:
        self.calls.append("remove_many")
        raise StoreError("store offline")


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()
