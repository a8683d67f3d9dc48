#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Utility exports for actionforge core.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from .logger import ModernLogger
from .exceptions import *  # noqa: F401,F403
from .exceptions import ExceptionFormatter, ExceptionTranslator
from .concurrency import ExclusiveAccessGuard, InstanceAccess, LoopBoundAsyncLock

# Common formatter shortcuts
format_exception = ExceptionFormatter.format_exception
format_exception_chain = ExceptionFormatter.format_exception_chain
format_exception_summary = ExceptionFormatter.format_exception_summary

__all__ = [
    "ModernLogger",
    "ExceptionFormatter",
    "ExceptionTranslator",
    "ExclusiveAccessGuard",
    "InstanceAccess",
    "LoopBoundAsyncLock",
    "format_exception",
    "format_exception_chain",
    "format_exception_summary",
]
