"""
Result container for expected failures at the collaborator boundary.

The scoring core never raises for missing data, so the only failures the
service sees come from stores and sources: lookups that fail, time out or
return nothing. Those travel as ``Result.err`` values; programming errors
still raise.
"""

from typing import Generic, TypeVar

ValueT = TypeVar("ValueT")


class Result(Generic[ValueT]):
    """
    Either a value or the exception explaining why there is none.

    ``Result.ok(None)`` is a valid success for operations with no payload.
    """

    __slots__ = ("_value", "_error")

    def __init__(self, value: ValueT | None = None, error: Exception | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        self._value: ValueT | None = value
        self._error: Exception | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: Exception) -> "Result[ValueT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]

    def unwrap_or(self, default: ValueT) -> ValueT:
        return self._value if self._error is None else default  # type: ignore[return-value]

    def unwrap_err(self) -> Exception:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.err({self._error!r})"
        return f"Result.ok({self._value!r})"
