"""Resultado explícito das etapas do pipeline.

Cada serviço devolve StepResult em vez de engolir ou propagar exceções;
o use case decide, pelo tipo de erro, se continua ou aborta.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class StepErrorKind(StrEnum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


@dataclass(frozen=True, slots=True)
class StepResult(Generic[T]):
    value: T | None = None
    error_kind: StepErrorKind | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T | None = None) -> StepResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: StepErrorKind, error: str) -> StepResult[T]:
        return cls(error_kind=kind, error=error)
