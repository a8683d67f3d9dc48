#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Handler synthesis for action methods.

An ``ActionDefinition`` is produced once per decorated function while its
class body executes. Binding it to the owning class yields the
``OperationDescriptor`` a registry stores: the operation name, the owning
type, and an async handler that

1. checks the type-erased service reference against the owning type,
   returning ``TypeMismatchError`` without calling the method on mismatch;
2. calls the original method with ``(context, params)``;
3. normalizes the outcome according to the method's ``ReturnShape``.

Handlers never raise for failures of the wrapped method: they come back as
``Result.err`` carrying ``"Error executing <operation>"`` chained to the
original error.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple

from .data.models import ServiceHandle, ServiceResponse
from .data.result import Result
from .data.values import to_value
from .returns import ReturnShape
from .signature import AnnotatedFunction, ReceiverKind, ReceiverToken
from .utils.exceptions import ExceptionTranslator
from .utils.logger import ModernLogger

Params = Optional[Mapping[str, Any]]
Handler = Callable[[ServiceHandle, Any, str, Params], Awaitable[Result[Any]]]
Body = Callable[[Any, Any, Params], Awaitable[Result[Any]]]

_logger = ModernLogger(name="actionforge.synthesis")


@dataclass(frozen=True)
class OperationDescriptor:
    """
    Registration record for one action of one service type.
    """

    operation_name: str
    service_type: type
    handler: Handler
    receiver: ReceiverKind
    shape: ReturnShape
    method_name: str

    @property
    def exclusive(self) -> bool:
        return self.receiver is ReceiverKind.BY_MUTABLE_REFERENCE

    async def invoke(
        self, service_ref: ServiceHandle, context: Any, params: Params = None
    ) -> Result[Any]:
        return await self.handler(service_ref, context, self.operation_name, params)


@dataclass(frozen=True)
class ActionDefinition:
    """
    Decoration-time output for one action method, not yet tied to a class.
    """

    operation_name: str
    function: Callable[..., Any]
    signature: AnnotatedFunction
    receiver: ReceiverToken
    shape: ReturnShape
    success_message: str
    options: Tuple[Tuple[str, str], ...] = ()

    def bind(self, owner: type) -> OperationDescriptor:
        return synthesize(self, owner)


async def _call_action(
    function: Callable[..., Any], service: Any, context: Any, params: Params
) -> Any:
    outcome = function(service, context, params)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    if inspect.isasyncgen(outcome):
        outcome = [item async for item in outcome]
    return outcome


def _as_result(outcome: Any) -> Result[Any]:
    if isinstance(outcome, Result):
        return outcome
    return Result.ok(outcome)


def _wrapped_response_body(definition: ActionDefinition) -> Body:
    function = definition.function
    operation_name = definition.operation_name

    def add_context(error: BaseException) -> BaseException:
        return ExceptionTranslator.as_action_execution_error(
            error, operation_name=operation_name
        )

    async def body(service: Any, context: Any, params: Params) -> Result[Any]:
        try:
            outcome = await _call_action(function, service, context, params)
        except Exception as exc:
            return Result.err(add_context(exc))
        # The method already built its response; only the error gets context.
        return _as_result(outcome).map_err(add_context)

    return body


def _success_wrapping_body(definition: ActionDefinition) -> Body:
    function = definition.function
    operation_name = definition.operation_name
    success_message = definition.success_message
    unpack_result = definition.shape is ReturnShape.RAW_RESULT

    def add_context(error: BaseException) -> Result[Any]:
        return Result.err(
            ExceptionTranslator.as_action_execution_error(
                error, operation_name=operation_name
            )
        )

    async def body(service: Any, context: Any, params: Params) -> Result[Any]:
        try:
            outcome = await _call_action(function, service, context, params)
        except Exception as exc:
            return add_context(exc)

        if unpack_result:
            result = _as_result(outcome)
            if result.is_err:
                return add_context(result.error)
            outcome = result.value

        try:
            payload = to_value(outcome)
        except Exception as exc:
            return add_context(exc)
        return Result.ok(ServiceResponse.success(success_message, payload))

    return body


_BODY_FACTORIES: Dict[ReturnShape, Callable[[ActionDefinition], Body]] = {
    ReturnShape.WRAPPED_RESPONSE: _wrapped_response_body,
    ReturnShape.RAW_RESULT: _success_wrapping_body,
    ReturnShape.RAW: _success_wrapping_body,
}


def synthesize(definition: ActionDefinition, owner: type) -> OperationDescriptor:
    """
    Build the registration record for ``definition`` on class ``owner``.
    """
    if not isinstance(owner, type):
        raise TypeError(f"action owner must be a class, got {owner!r}")

    body = _BODY_FACTORIES[definition.shape](definition)

    async def handler(
        service_ref: ServiceHandle, context: Any, operation_name: str, params: Params
    ) -> Result[Any]:
        downcast = service_ref.downcast(owner)
        if downcast.is_err:
            return downcast
        return await body(downcast.value, context, params)

    handler.__name__ = f"{definition.signature.name}_handler"
    handler.__qualname__ = f"{owner.__qualname__}.{handler.__name__}"

    _logger.debug(
        "Synthesized handler for %s.%s as '%s' (%s)",
        owner.__qualname__,
        definition.signature.name,
        definition.operation_name,
        definition.shape.value,
    )

    return OperationDescriptor(
        operation_name=definition.operation_name,
        service_type=owner,
        handler=handler,
        receiver=definition.receiver.kind,
        shape=definition.shape,
        method_name=definition.signature.name,
    )


__all__ = [
    "ActionDefinition",
    "Handler",
    "OperationDescriptor",
    "synthesize",
]
