#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
actionforge core exports (lazy-loaded).

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from importlib import import_module
from typing import Any, Dict, Tuple

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "parse_attribute_options": ("actionforge.core.attributes", "parse_attribute_options"),
    "AnnotatedFunction": ("actionforge.core.signature", "AnnotatedFunction"),
    "Parameter": ("actionforge.core.signature", "Parameter"),
    "ReceiverKind": ("actionforge.core.signature", "ReceiverKind"),
    "validate_signature": ("actionforge.core.signature", "validate_signature"),
    "extract_parameters": ("actionforge.core.signature", "extract_parameters"),
    "ReturnShape": ("actionforge.core.returns", "ReturnShape"),
    "classify_return": ("actionforge.core.returns", "classify_return"),
    "synthesize": ("actionforge.core.synthesis", "synthesize"),
    "generate_parameter_extraction": (
        "actionforge.core.extraction",
        "generate_parameter_extraction",
    ),
    "ActionForgeConfig": ("actionforge.core.config", "ActionForgeConfig"),
    "get_config": ("actionforge.core.config", "get_config"),
    "create_config": ("actionforge.core.config", "create_config"),
}

__all__ = sorted(_EXPORT_MAP.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MAP:
        raise AttributeError(f"module 'actionforge.core' has no attribute '{name}'")

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
