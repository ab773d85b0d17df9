"""Explicit results for single-record service operations.

Services never let gateway exceptions escape and never use ``None`` to mean
two different things. Every single-record operation returns one of:

- ``Ok(value)``   - the operation succeeded
- ``NotFound``    - the target record does not exist
- ``Failed``      - the store rejected or failed the operation

Routes translate ``NotFound`` and ``Failed`` into distinct API errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    resource: str
    resource_id: str


@dataclass(frozen=True)
class Failed:
    resource: str
    reason: str


Outcome = Union[Ok[T], NotFound, Failed]
