#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Function shape analysis and eligibility checks for action methods.

``AnnotatedFunction.from_callable`` reads the decorated function's source
and parses it with ``ast``; every later decision (async or not, receiver
kind, return shape) is made from that tree. When the source cannot be
retrieved (functions built with ``exec``, interactive sessions) the
runtime signature is used instead and its annotations are rendered back
into expressions.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import ast
import inspect
import textwrap
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

from .syntax import annotation_expression, expression_source, outer_type_name
from .utils.exceptions import InvalidSignatureError, SourceSpan

T = TypeVar("T")

RECEIVER_NAME = "self"

NOT_ASYNC_MESSAGE = "action methods must be asynchronous"
NO_RECEIVER_MESSAGE = "action handlers must be methods with a receiver (self) parameter"


class Shared(Generic[T]):
    """
    Annotation marker for a borrowed, read-only view of ``T``.
    """


class Exclusive(Generic[T]):
    """
    Annotation marker for exclusive access to ``T``.

    On the receiver (``self: Exclusive["MyService"]``) it asks the
    dispatcher to serialize calls against the same service instance.
    """


BORROW_MARKERS = (Shared.__name__, Exclusive.__name__)


class ReceiverKind(Enum):
    NONE = "none"
    BY_REFERENCE = "by_reference"
    BY_MUTABLE_REFERENCE = "by_mutable_reference"


@dataclass(frozen=True)
class Parameter:
    """
    Non-receiver parameter of an action method.
    """

    name: str
    declared_type: str
    is_reference: bool


@dataclass(frozen=True)
class ReceiverToken:
    """
    What the synthesizer needs to type-check the service at call time.

    The owning class does not exist yet while its body is executing, so only
    its qualified name is known here; the class itself is supplied when the
    definition is bound.
    """

    kind: ReceiverKind
    owner_qualname: str

    @property
    def exclusive(self) -> bool:
        return self.kind is ReceiverKind.BY_MUTABLE_REFERENCE


@dataclass(frozen=True)
class AnnotatedFunction:
    """
    Parsed view of a decorated function's declared shape.
    """

    name: str
    qualname: str
    parameters: Tuple[Parameter, ...]
    returns: Optional[ast.expr]
    is_async: bool
    receiver: ReceiverKind
    span: SourceSpan
    from_source: bool = True

    @property
    def return_annotation(self) -> str:
        return expression_source(self.returns)

    @classmethod
    def from_node(
        cls,
        node: ast.AST,
        *,
        qualname: Optional[str] = None,
        filename: str = "<unknown>",
        line_offset: int = 0,
        column_offset: int = 0,
    ) -> "AnnotatedFunction":
        """
        Build from a parsed ``def`` / ``async def`` node.
        """
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            raise TypeError(f"expected a function definition node, got {type(node).__name__}")

        positional = list(node.args.posonlyargs) + list(node.args.args)
        receiver = ReceiverKind.NONE
        if positional and positional[0].arg == RECEIVER_NAME:
            receiver = _receiver_kind(positional[0].annotation)
            positional = positional[1:]

        parameters = tuple(
            _parameter(arg.arg, arg.annotation)
            for arg in positional + list(node.args.kwonlyargs)
        )

        return cls(
            name=node.name,
            qualname=qualname or node.name,
            parameters=parameters,
            returns=node.returns,
            is_async=isinstance(node, ast.AsyncFunctionDef),
            receiver=receiver,
            span=SourceSpan(
                filename=filename,
                line=node.lineno + line_offset,
                column=node.col_offset + column_offset,
            ),
        )

    @classmethod
    def from_callable(cls, func: Callable[..., Any]) -> "AnnotatedFunction":
        target = inspect.unwrap(getattr(func, "__func__", func))
        located = _locate_function_node(target)
        if located is not None:
            node, filename, line_offset, column_offset = located
            return cls.from_node(
                node,
                qualname=getattr(target, "__qualname__", None),
                filename=filename,
                line_offset=line_offset,
                column_offset=column_offset,
            )
        return cls._from_signature(target)

    @classmethod
    def _from_signature(cls, func: Callable[..., Any]) -> "AnnotatedFunction":
        signature = inspect.signature(func)
        positional_kinds = (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        )
        params = [
            p for p in signature.parameters.values()
            if p.kind in positional_kinds or p.kind is inspect.Parameter.KEYWORD_ONLY
        ]

        receiver = ReceiverKind.NONE
        if params and params[0].name == RECEIVER_NAME and params[0].kind in positional_kinds:
            receiver = _receiver_kind(annotation_expression(params[0].annotation))
            params = params[1:]

        code = getattr(func, "__code__", None)
        return cls(
            name=func.__name__,
            qualname=getattr(func, "__qualname__", func.__name__),
            parameters=tuple(
                _parameter(p.name, annotation_expression(p.annotation)) for p in params
            ),
            returns=annotation_expression(signature.return_annotation),
            is_async=inspect.iscoroutinefunction(func) or inspect.isasyncgenfunction(func),
            receiver=receiver,
            span=SourceSpan(
                filename=code.co_filename if code is not None else "<unknown>",
                line=code.co_firstlineno if code is not None else 0,
                column=0,
            ),
            from_source=False,
        )


def _receiver_kind(annotation: Optional[ast.expr]) -> ReceiverKind:
    if outer_type_name(annotation) == Exclusive.__name__:
        return ReceiverKind.BY_MUTABLE_REFERENCE
    return ReceiverKind.BY_REFERENCE


def _parameter(name: str, annotation: Optional[ast.expr]) -> Parameter:
    return Parameter(
        name=name,
        declared_type=expression_source(annotation),
        is_reference=outer_type_name(annotation) in BORROW_MARKERS,
    )


def _locate_function_node(
    func: Callable[..., Any],
) -> Optional[Tuple[ast.AST, str, int, int]]:
    try:
        lines, first_line = inspect.getsourcelines(func)
        filename = inspect.getsourcefile(func) or "<unknown>"
    except (OSError, TypeError):
        return None

    indent = min(
        (len(line) - len(line.lstrip()) for line in lines if line.strip()),
        default=0,
    )
    try:
        tree = ast.parse(textwrap.dedent("".join(lines)))
    except SyntaxError:
        return None

    name = getattr(func, "__name__", None)
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name == name:
            return node, filename, first_line - 1, indent
    return None


def validate_signature(function: AnnotatedFunction) -> ReceiverToken:
    """
    Check that ``function`` can become an action handler.

    Raises ``InvalidSignatureError`` when it is not ``async`` or has no
    ``self`` receiver. Nothing else about the signature is constrained.
    """
    if not function.is_async:
        raise InvalidSignatureError(
            NOT_ASYNC_MESSAGE,
            function_name=function.name,
            span=function.span,
            anchor="declaration",
        )

    if function.receiver is ReceiverKind.NONE:
        raise InvalidSignatureError(
            NO_RECEIVER_MESSAGE,
            function_name=function.name,
            span=function.span,
            anchor="signature",
        )

    owner_qualname, _, _ = function.qualname.rpartition(".")
    return ReceiverToken(kind=function.receiver, owner_qualname=owner_qualname)


def extract_parameters(function: AnnotatedFunction) -> List[Parameter]:
    """
    Non-receiver parameters in declaration order.
    """
    return list(function.parameters)


__all__ = [
    "AnnotatedFunction",
    "BORROW_MARKERS",
    "Exclusive",
    "Parameter",
    "ReceiverKind",
    "ReceiverToken",
    "Shared",
    "extract_parameters",
    "validate_signature",
]
