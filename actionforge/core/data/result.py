#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Success-or-error value returned by action handlers.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Result(Generic[T]):
    """
    Either a success value or an exception, never both.

    Action methods may return ``Result.ok(...)`` / ``Result.err(...)``
    explicitly; generated handlers always return one.
    """

    __slots__ = ("_ok", "_value", "_error")

    def __init__(self, ok: bool, value: Any = None, error: Optional[BaseException] = None) -> None:
        if not ok and not isinstance(error, BaseException):
            raise TypeError("Result.err requires an exception instance")
        self._ok = ok
        self._value = value
        self._error = error

    @classmethod
    def ok(cls, value: Any = None) -> "Result[Any]":
        return cls(True, value=value)

    @classmethod
    def err(cls, error: BaseException) -> "Result[Any]":
        return cls(False, error=error)

    @property
    def is_ok(self) -> bool:
        return self._ok

    @property
    def is_err(self) -> bool:
        return not self._ok

    @property
    def value(self) -> Optional[T]:
        return self._value if self._ok else None

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def unwrap(self) -> T:
        """
        Return the success value or raise the carried error.
        """
        if not self._ok:
            raise self._error  # type: ignore[misc]
        return self._value

    def unwrap_or(self, default: Any) -> Any:
        return self._value if self._ok else default

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        if not self._ok:
            return self  # type: ignore[return-value]
        return Result.ok(func(self._value))

    def map_err(self, func: Callable[[BaseException], BaseException]) -> "Result[T]":
        if self._ok:
            return self
        return Result.err(func(self._error))  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return (
            self._ok == other._ok
            and self._value == other._value
            and self._error is other._error
        )

    def __hash__(self) -> int:
        return hash((self._ok, id(self._error)))

    def __repr__(self) -> str:
        if self._ok:
            return f"Result.ok({self._value!r})"
        return f"Result.err({self._error!r})"
