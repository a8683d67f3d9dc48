#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Value types exchanged between services, handlers and the dispatcher.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from .models import RequestContext, ServiceHandle, ServiceResponse
from .result import Result
from .values import extract_parameter, to_value

__all__ = [
    "RequestContext",
    "Result",
    "ServiceHandle",
    "ServiceResponse",
    "extract_parameter",
    "to_value",
]
