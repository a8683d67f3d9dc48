#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Concurrency primitives used when dispatching actions.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import asyncio
import threading
from typing import Any, Dict, Optional

from .exceptions import ConcurrencyBoundaryError


class LoopBoundAsyncLock:
    """
    Async lock created on first use inside a running event loop.

    Service instances are usually mounted before any loop runs, so the
    underlying ``asyncio.Lock`` is built lazily. Once built it belongs to
    that loop until the loop is closed; a second live loop gets
    ``ConcurrencyBoundaryError``.
    """

    def __init__(self, name: str = "loop-bound-lock") -> None:
        self._name = name
        self._bound_loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock: Optional[asyncio.Lock] = None
        self._guard = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def _get_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()

        with self._guard:
            if self._lock is None or self._bound_loop_closed():
                self._lock = asyncio.Lock()
                self._bound_loop = loop
                return self._lock

            if self._bound_loop is not loop:
                raise ConcurrencyBoundaryError(
                    f"Async lock '{self._name}' is bound to a different event loop",
                    resource_name=self._name,
                    bound_loop_id=str(id(self._bound_loop)),
                    current_loop_id=str(id(loop)),
                )

            return self._lock

    def _bound_loop_closed(self) -> bool:
        # asyncio.run() closes its loop on exit; a later asyncio.run() may rebind
        return self._bound_loop is not None and self._bound_loop.is_closed()

    async def acquire(self) -> bool:
        lock = self._get_lock()
        await lock.acquire()
        return True

    def release(self) -> None:
        lock = self._get_lock()
        lock.release()

    def locked(self) -> bool:
        if self._lock is None:
            return False
        return self._lock.locked()

    async def __aenter__(self) -> "LoopBoundAsyncLock":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.release()


class InstanceAccess:
    """
    Async context for one action call against one service instance.

    Holds the instance lock for exclusive calls; shared calls pass straight
    through and are counted so ``ExclusiveAccessGuard.active`` reports them.
    """

    def __init__(self, guard: "ExclusiveAccessGuard", instance: Any, exclusive: bool) -> None:
        self._guard = guard
        self._instance = instance
        self._lock = guard.lock_for(instance) if exclusive else None

    @property
    def exclusive(self) -> bool:
        return self._lock is not None

    async def __aenter__(self) -> "InstanceAccess":
        if self._lock is not None:
            await self._lock.acquire()
        self._guard._enter(self._instance)
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self._guard._leave(self._instance)
        if self._lock is not None:
            self._lock.release()


class ExclusiveAccessGuard:
    """
    Per-instance access control for dispatched actions.

    Each service instance gets its own ``LoopBoundAsyncLock``, created on
    first exclusive use. Calls through ``access`` also maintain an in-flight
    count per instance, which lets a host refuse to unmount a busy service.
    """

    def __init__(self, name: str = "exclusive-access") -> None:
        self._name = name
        self._locks: Dict[int, LoopBoundAsyncLock] = {}
        self._active: Dict[int, int] = {}
        self._guard = threading.Lock()

    def lock_for(self, instance: Any) -> LoopBoundAsyncLock:
        key = id(instance)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = LoopBoundAsyncLock(
                    name=f"{self._name}:{type(instance).__name__}#{key:x}"
                )
                self._locks[key] = lock
            return lock

    def access(self, instance: Any, exclusive: bool) -> InstanceAccess:
        """
        ``async with guard.access(service, exclusive=descriptor.exclusive):``
        """
        return InstanceAccess(self, instance, exclusive)

    def active(self, instance: Any) -> int:
        """
        Number of calls currently running against ``instance``.
        """
        return self._active.get(id(instance), 0)

    def _enter(self, instance: Any) -> None:
        key = id(instance)
        with self._guard:
            self._active[key] = self._active.get(key, 0) + 1

    def _leave(self, instance: Any) -> None:
        key = id(instance)
        with self._guard:
            remaining = self._active.get(key, 0) - 1
            if remaining > 0:
                self._active[key] = remaining
            else:
                self._active.pop(key, None)

    def forget(self, instance: Any) -> None:
        with self._guard:
            self._locks.pop(id(instance), None)

    def __len__(self) -> int:
        return len(self._locks)
