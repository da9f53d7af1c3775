"""Result values returned by client operations."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """Outcome of an operation: an optional value plus any errors.

    A result can carry a value and errors at the same time, for example a
    query whose RPC succeeded but whose transaction context could not be
    merged. Check ``is_failed`` before trusting ``value``.
    """
    value: T | None = None
    errors: list[Exception] = field(default_factory=list)

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: Exception) -> "Result[T]":
        return cls(errors=[error])

    @property
    def is_success(self) -> bool:
        return not self.errors

    @property
    def is_failed(self) -> bool:
        return bool(self.errors)

    @property
    def error(self) -> Exception | None:
        """First error, if any."""
        return self.errors[0] if self.errors else None

    def with_errors(self, errors: list[Exception]) -> "Result[T]":
        """Return a copy that keeps the value and adds ``errors``."""
        return Result(value=self.value, errors=[*self.errors, *errors])

    def cast(self) -> "Result":
        """Drop the value, keeping only the errors."""
        return Result(errors=list(self.errors))

    def unwrap(self) -> T | None:
        """Return the value, raising the first error if the result failed."""
        if self.errors:
            raise self.errors[0]
        return self.value
