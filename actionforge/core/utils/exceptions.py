#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exception hierarchy for actionforge.

Decoration-time failures (``InvalidSignatureError``) are raised while the
owning class body executes. Invocation-time failures are carried back to
the dispatcher inside ``Result.err`` values.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class ActionForgeError(Exception):
    """
    Base class for all actionforge errors.
    """

    default_error_code = "ACTIONFORGE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.cause = cause
        self.context: Dict[str, Any] = {
            key: value for key, value in context.items() if value is not None
        }
        if cause is not None and self.__cause__ is None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.context:
            payload["context"] = dict(self.context)
        if self.cause is not None:
            payload["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return payload


@dataclass(frozen=True)
class SourceSpan:
    """
    Location of a syntax node inside the file that defined an action.
    """

    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


class InvalidSignatureError(ActionForgeError, TypeError):
    """
    Raised when a decorated function is not eligible to become an action.
    """

    default_error_code = "INVALID_SIGNATURE"

    def __init__(
        self,
        message: str,
        *,
        function_name: Optional[str] = None,
        span: Optional[SourceSpan] = None,
        anchor: str = "signature",
    ) -> None:
        super().__init__(message, function_name=function_name, anchor=anchor)
        self.function_name = function_name
        self.span = span
        self.anchor = anchor

    def format_diagnostic(self) -> str:
        """
        Render the error the way a compiler reports it.
        """
        location = str(self.span) if self.span is not None else "<unknown>"
        subject = f" in '{self.function_name}'" if self.function_name else ""
        return f"{location}: error: {self.message}{subject} (at {self.anchor})"


class TypeMismatchError(ActionForgeError):
    """
    The service handed to a handler is not the type the action belongs to.
    """

    default_error_code = "SERVICE_TYPE_MISMATCH"

    def __init__(
        self,
        message: str = "Service type mismatch in action handler",
        *,
        expected_type: Optional[str] = None,
        actual_type: Optional[str] = None,
    ) -> None:
        super().__init__(
            message, expected_type=expected_type, actual_type=actual_type
        )
        self.expected_type = expected_type
        self.actual_type = actual_type


class MissingParameterError(ActionForgeError, KeyError):
    """
    A required parameter is absent from the request's parameter bag.
    """

    default_error_code = "MISSING_PARAMETER"

    def __init__(self, parameter_name: str, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Missing required parameter: {parameter_name}",
            parameter_name=parameter_name,
        )
        self.parameter_name = parameter_name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class ActionExecutionError(ActionForgeError):
    """
    Contextual wrapper naming the operation whose execution failed.
    """

    default_error_code = "ACTION_EXECUTION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        operation_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause=cause, operation_name=operation_name)
        self.operation_name = operation_name


class ActionNotFoundError(ActionForgeError, LookupError):
    """
    No service or action is registered under the requested path.
    """

    default_error_code = "ACTION_NOT_FOUND"

    def __init__(
        self,
        message: str,
        *,
        service_path: Optional[str] = None,
        operation_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message, service_path=service_path, operation_name=operation_name
        )
        self.service_path = service_path
        self.operation_name = operation_name

    def __str__(self) -> str:
        return self.message


class DuplicateActionError(ActionForgeError, ValueError):
    """
    An operation name is already registered for the same service type.
    """

    default_error_code = "DUPLICATE_ACTION"

    def __init__(
        self,
        message: str,
        *,
        service_type: Optional[str] = None,
        operation_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message, service_type=service_type, operation_name=operation_name
        )
        self.service_type = service_type
        self.operation_name = operation_name


class ConcurrencyBoundaryError(ActionForgeError, RuntimeError):
    """
    A loop-bound primitive was used from an event loop it does not belong to.
    """

    default_error_code = "CONCURRENCY_BOUNDARY"

    def __init__(
        self,
        message: str,
        *,
        resource_name: Optional[str] = None,
        bound_loop_id: Optional[str] = None,
        current_loop_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            resource_name=resource_name,
            bound_loop_id=bound_loop_id,
            current_loop_id=current_loop_id,
        )


class ExceptionTranslator:
    """
    Convert arbitrary exceptions into actionforge error types.
    """

    @staticmethod
    def context_message(operation_name: str) -> str:
        return f"Error executing {operation_name}"

    @classmethod
    def as_action_execution_error(
        cls, exc: BaseException, *, operation_name: str
    ) -> ActionExecutionError:
        """
        Attach the "Error executing <operation>" context to ``exc``.

        Context is always added as a new layer; the original error stays
        reachable through ``__cause__``.
        """
        return ActionExecutionError(
            cls.context_message(operation_name),
            operation_name=operation_name,
            cause=exc,
        )


class ExceptionFormatter:
    """
    Render exception chains for log output.
    """

    @staticmethod
    def format_exception(exc: BaseException) -> str:
        return f"{type(exc).__name__}: {exc}"

    @classmethod
    def format_exception_chain(cls, exc: BaseException) -> List[str]:
        chain: List[str] = []
        seen = set()
        current: Optional[BaseException] = exc
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(cls.format_exception(current))
            current = current.__cause__ or current.__context__
        return chain

    @classmethod
    def format_exception_summary(cls, exc: BaseException) -> str:
        return " <- caused by: ".join(cls.format_exception_chain(exc))


__all__ = [
    "ActionForgeError",
    "SourceSpan",
    "InvalidSignatureError",
    "TypeMismatchError",
    "MissingParameterError",
    "ActionExecutionError",
    "ActionNotFoundError",
    "DuplicateActionError",
    "ConcurrencyBoundaryError",
    "ExceptionTranslator",
    "ExceptionFormatter",
]
