#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Syntax-tree helpers shared by the signature and return-type analysis.

Type names are matched textually on the last path segment; nothing here
imports or resolves the names it looks at.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import ast
import inspect
import typing
from typing import Any, List, Optional


def parse_expression(text: str) -> Optional[ast.expr]:
    """
    Parse an annotation string into an expression node, or ``None``.
    """
    try:
        return ast.parse(text.strip(), mode="eval").body
    except (SyntaxError, ValueError):
        return None


def _unquote(expr: Optional[ast.expr]) -> Optional[ast.expr]:
    # String annotations ("Result[X]") are parsed one level deep
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        return parse_expression(expr.value)
    return expr


def outer_type_name(expr: Optional[ast.expr]) -> Optional[str]:
    """
    Identifier of the outermost named type in ``expr``.

    ``Result[X]`` -> ``"Result"``, ``pkg.models.User`` -> ``"User"``.
    Unions, calls and literals have no outer name.
    """
    expr = _unquote(expr)
    if isinstance(expr, ast.Subscript):
        expr = expr.value
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        return expr.attr
    return None


def generic_arguments(expr: Optional[ast.expr]) -> List[ast.expr]:
    """
    Generic arguments of a subscripted type, in declaration order.
    """
    expr = _unquote(expr)
    if not isinstance(expr, ast.Subscript):
        return []
    argument = expr.slice
    if isinstance(argument, ast.Tuple):
        return list(argument.elts)
    return [argument]


def expression_source(expr: Optional[ast.expr]) -> str:
    if expr is None:
        return ""
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        return expr.value
    return ast.unparse(expr)


def _render_annotation(annotation: Any) -> str:
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    if annotation is None or annotation is type(None):
        return "None"
    if annotation is Ellipsis:
        return "..."

    origin = typing.get_origin(annotation)
    if origin is not None:
        base = _render_annotation(origin)
        args = typing.get_args(annotation)
        if args:
            rendered = ", ".join(_render_annotation(a) for a in args)
            return f"{base}[{rendered}]"
        return base

    name = getattr(annotation, "__name__", None) or getattr(annotation, "_name", None)
    if name:
        return str(name)
    return repr(annotation)


def annotation_expression(annotation: Any) -> Optional[ast.expr]:
    """
    Turn a runtime annotation back into an expression node.

    Used only when a function's source is unavailable. The rendering keeps
    bare names so that textual matching behaves as it does on source.
    """
    if annotation is inspect.Signature.empty:
        return None
    return parse_expression(_render_annotation(annotation))


__all__ = [
    "annotation_expression",
    "expression_source",
    "generic_arguments",
    "outer_type_name",
    "parse_expression",
]
