"""Bead id sources.

The engine never picks ids itself; callers pass any object with a
``new_id()`` method so tests can run against a fixed sequence.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Protocol


class IdGenerator(Protocol):
    def new_id(self) -> str: ...


class UuidIds:
    """Random UUID4 strings (default for the HTTP host)."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


class SequentialIds:
    """Deterministic ``<prefix>1``, ``<prefix>2``, ... ids."""

    def __init__(self, prefix: str = "bead_", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
