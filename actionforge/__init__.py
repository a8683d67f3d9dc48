#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
actionforge public API with lazy imports.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from importlib import import_module
from typing import Any, Dict, Tuple

from ._version import __version__

__author__ = "Silan Hu"
__email__ = "silan.hu@u.nus.edu"

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "action": ("actionforge.decorators", "action"),
    "collect_actions": ("actionforge.decorators", "collect_actions"),
    "ActionRegistry": ("actionforge.registry", "ActionRegistry"),
    "ActionDispatcher": ("actionforge.dispatcher", "ActionDispatcher"),
    "OperationDescriptor": ("actionforge.core.synthesis", "OperationDescriptor"),
    "ActionDefinition": ("actionforge.core.synthesis", "ActionDefinition"),
    "ReturnShape": ("actionforge.core.returns", "ReturnShape"),
    "Exclusive": ("actionforge.core.signature", "Exclusive"),
    "Shared": ("actionforge.core.signature", "Shared"),
    "Result": ("actionforge.core.data", "Result"),
    "ServiceResponse": ("actionforge.core.data", "ServiceResponse"),
    "RequestContext": ("actionforge.core.data", "RequestContext"),
    "ServiceHandle": ("actionforge.core.data", "ServiceHandle"),
}

__all__ = ["__version__", *sorted(_EXPORT_MAP.keys())]


def __getattr__(name: str) -> Any:
    """
    Resolve public API symbols lazily.
    """
    if name not in _EXPORT_MAP:
        raise AttributeError(f"module 'actionforge' has no attribute '{name}'")

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
