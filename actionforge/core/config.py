#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Configuration for the action transformation pipeline.

The process-wide default is created lazily and honours these environment
variables:

- ``ACTIONFORGE_LOG_LEVEL``: log level name for actionforge loggers
- ``ACTIONFORGE_SUCCESS_MESSAGE``: message placed on wrapped success responses

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import os
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

DEFAULT_RESPONSE_TYPE_NAME = "ServiceResponse"
DEFAULT_RESULT_TYPE_NAME = "Result"
DEFAULT_SUCCESS_MESSAGE = "Operation succeeded"
DEFAULT_CONTEXT_PARAMETER_NAMES: Tuple[str, ...] = ("context", "ctx", "_context", "_ctx")


@dataclass(frozen=True)
class ActionForgeConfig:
    """
    Settings consulted while actions are decorated and invoked.
    """

    response_type_name: str = DEFAULT_RESPONSE_TYPE_NAME
    result_type_name: str = DEFAULT_RESULT_TYPE_NAME
    success_message: str = DEFAULT_SUCCESS_MESSAGE
    context_parameter_names: Tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_CONTEXT_PARAMETER_NAMES
    )
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.response_type_name.strip():
            raise ValueError("response_type_name cannot be empty")
        if not self.result_type_name.strip():
            raise ValueError("result_type_name cannot be empty")
        object.__setattr__(
            self, "context_parameter_names", tuple(self.context_parameter_names)
        )

    @classmethod
    def from_env(cls) -> "ActionForgeConfig":
        return cls(
            success_message=os.getenv("ACTIONFORGE_SUCCESS_MESSAGE", DEFAULT_SUCCESS_MESSAGE),
            log_level=os.getenv("ACTIONFORGE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )


_CONFIG_LOCK = threading.Lock()
_CONFIG: Optional[ActionForgeConfig] = None


def get_config() -> ActionForgeConfig:
    """
    Return the process default configuration.
    """
    global _CONFIG
    if _CONFIG is None:
        with _CONFIG_LOCK:
            if _CONFIG is None:
                _CONFIG = ActionForgeConfig.from_env()
    return _CONFIG


def create_config(base: Optional[ActionForgeConfig] = None, **overrides: Any) -> ActionForgeConfig:
    """
    Build a configuration from ``base`` (or the process default) with overrides.
    """
    return replace(base or get_config(), **overrides)


def set_config(config: Optional[ActionForgeConfig]) -> None:
    """
    Replace the process default; ``None`` re-reads the environment on next use.
    """
    global _CONFIG
    with _CONFIG_LOCK:
        _CONFIG = config
