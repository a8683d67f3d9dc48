#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging helpers for actionforge.

``ModernLogger`` wraps a named standard-library logger and attaches a
``rich`` console handler the first time a logger name is used. Components
either inherit from it (registry, dispatcher) or hold a module-level
instance (decorator pipeline).

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import logging
import threading
from typing import Any, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_LOCK = threading.Lock()
_CONSOLE: Optional[Console] = None


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        from ..config import get_config

        level = get_config().log_level
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def _get_console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(stderr=True)
    return _CONSOLE


class ModernLogger:
    """
    Thin logger facade with rich console output.
    """

    def __init__(self, name: str = "actionforge", level: Union[int, str, None] = None) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(_resolve_level(level))
        self._install_handler()

    def _install_handler(self) -> None:
        with _HANDLER_LOCK:
            if any(isinstance(h, RichHandler) for h in self._logger.handlers):
                return
            handler = RichHandler(
                console=_get_console(),
                show_path=False,
                rich_tracebacks=True,
                markup=False,
            )
            handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
            self._logger.addHandler(handler)
            self._logger.propagate = False

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_level(self, level: Union[int, str]) -> None:
        self._logger.setLevel(_resolve_level(level))

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(message, *args, **kwargs)

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.critical(message, *args, **kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.exception(message, *args, **kwargs)
