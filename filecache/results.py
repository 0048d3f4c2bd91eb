"""Explicit outcomes for cache operations that never raise."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Found:
    value: Any


@dataclass(frozen=True)
class Absent:
    reason: str = "missing"


@dataclass(frozen=True)
class Ok:
    path: str


@dataclass(frozen=True)
class Ignored:
    reason: str


Lookup = Union[Found, Absent]
WriteResult = Union[Ok, Ignored]
