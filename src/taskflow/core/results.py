# src/taskflow/core/results.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(StrEnum):
    TRANSPORT = "transport"  # network error or non-2xx response
    DECODE = "decode"  # response did not match the task contract
    VALIDATION = "validation"  # rejected locally, nothing was sent
    NOT_FOUND = "not_found"  # id is not in the local collection
    REJECTED = "rejected"  # attachment refused (not a PDF)


@dataclass(frozen=True, slots=True)
class OpResult(Generic[T]):
    """
    Outcome of a controller operation.

    Either ok=True with `value`, or ok=False with `kind` and a human-readable `reason`.
    """

    ok: bool
    value: T | None = None
    kind: ErrorKind | None = None
    reason: str = ""

    @classmethod
    def success(cls, value: T | None = None) -> OpResult[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, reason: str) -> OpResult[T]:
        return cls(ok=False, kind=kind, reason=reason)

    def __bool__(self) -> bool:
        return self.ok
