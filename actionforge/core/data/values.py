#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Wire-value conversion and parameter lookup primitives.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import dataclasses
from enum import Enum
from typing import Any, Mapping, Optional

from ..utils.exceptions import MissingParameterError

_SCALARS = (str, int, float, bool, bytes, type(None))


def to_value(obj: Any) -> Any:
    """
    Convert a native return value into a wire payload.

    Objects exposing ``to_value()`` convert themselves; dataclasses become
    dicts; mappings and sequences are converted recursively; enums collapse
    to their value. Anything else is passed through unchanged.
    """
    if isinstance(obj, _SCALARS):
        return obj

    converter = getattr(obj, "to_value", None)
    if callable(converter) and not isinstance(obj, type):
        return converter()

    if isinstance(obj, Enum):
        return to_value(obj.value)

    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: to_value(getattr(obj, f.name)) for f in dataclasses.fields(obj)
        }

    if isinstance(obj, Mapping):
        return {str(key): to_value(value) for key, value in obj.items()}

    if isinstance(obj, (list, tuple, set, frozenset)):
        items = sorted(obj, key=repr) if isinstance(obj, (set, frozenset)) else obj
        return [to_value(item) for item in items]

    return obj


def extract_parameter(
    params: Optional[Mapping[str, Any]],
    name: str,
    message: Optional[str] = None,
) -> Any:
    """
    Look ``name`` up in the request's parameter bag.
    """
    if params is None or name not in params:
        raise MissingParameterError(name, message)
    return params[name]
