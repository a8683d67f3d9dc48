#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Decorator option parsing.

Options may arrive as keyword arguments (``@action(name="get_user")``) or
as a raw token string (``@action('name = "get_user"')``). Parsing is
best-effort: malformed input yields an empty mapping and the caller falls
back to the function's own name.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import ast
from typing import Any, Dict, Mapping, Optional, Union

AttributeOptions = Dict[str, str]

NAME_OPTION = "name"


def _parse_token_string(tokens: str) -> AttributeOptions:
    if not tokens.strip():
        return {}
    try:
        # Reuse call-argument syntax: `name = "x", other = "y"`
        tree = ast.parse(f"_({tokens})", mode="eval")
    except (SyntaxError, ValueError):
        return {}

    call = tree.body
    if not isinstance(call, ast.Call):
        return {}

    options: AttributeOptions = {}
    for keyword in call.keywords:
        if keyword.arg is None:
            continue
        value = keyword.value
        if isinstance(value, ast.Constant) and isinstance(value.value, str):
            options[keyword.arg] = value.value
    return options


def parse_attribute_options(
    tokens: Union[str, Mapping[str, Any], None],
) -> AttributeOptions:
    """
    Turn decorator configuration into a name -> string value mapping.

    Never raises: anything that cannot be understood is dropped.
    """
    if tokens is None:
        return {}
    if isinstance(tokens, str):
        return _parse_token_string(tokens)
    if isinstance(tokens, Mapping):
        return {
            str(key): value
            for key, value in tokens.items()
            if isinstance(value, str)
        }
    return {}


def resolve_operation_name(options: Mapping[str, str], default: str) -> str:
    """
    Explicit ``name`` option if present and non-blank, else ``default``.
    """
    explicit: Optional[str] = options.get(NAME_OPTION)
    if explicit is not None and explicit.strip():
        return explicit
    return default


__all__ = [
    "AttributeOptions",
    "NAME_OPTION",
    "parse_attribute_options",
    "resolve_operation_name",
]
