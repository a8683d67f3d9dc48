#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Return-type classification for action methods.

The declared return annotation decides which handler body is generated:

- ``Result[ServiceResponse]`` -> ``WRAPPED_RESPONSE`` (passed through)
- ``Result[...]`` / bare ``Result`` -> ``RAW_RESULT`` (success value wrapped)
- anything else, or no annotation -> ``RAW`` (returned value wrapped)

Caveat: names are compared on their last path segment only. Aliases are
not followed, so ``from x import Result as Outcome`` followed by
``-> Outcome[ServiceResponse]`` classifies as ``RAW``, and any unrelated
type that happens to be called ``Result`` is treated as one.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import ast
from enum import Enum
from typing import Optional

from .config import DEFAULT_RESPONSE_TYPE_NAME, DEFAULT_RESULT_TYPE_NAME
from .syntax import generic_arguments, outer_type_name


class ReturnShape(Enum):
    WRAPPED_RESPONSE = "wrapped_response"
    RAW_RESULT = "raw_result"
    RAW = "raw"

    @property
    def wraps_success(self) -> bool:
        return self is not ReturnShape.WRAPPED_RESPONSE


def classify_return(
    returns: Optional[ast.expr],
    response_type_name: str = DEFAULT_RESPONSE_TYPE_NAME,
    result_type_name: str = DEFAULT_RESULT_TYPE_NAME,
) -> ReturnShape:
    if returns is None:
        return ReturnShape.RAW

    if outer_type_name(returns) != result_type_name:
        return ReturnShape.RAW

    arguments = generic_arguments(returns)
    if arguments and outer_type_name(arguments[0]) == response_type_name:
        return ReturnShape.WRAPPED_RESPONSE
    return ReturnShape.RAW_RESULT


__all__ = ["ReturnShape", "classify_return"]
