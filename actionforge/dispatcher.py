#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Minimal host-side dispatcher for registered actions.

Services are mounted under a path segment; requests address an action as
``"<service-path>/<operation-name>"``.

    >>> registry = ActionRegistry()
    >>> registry.register_service(UserService)
    >>> dispatcher = ActionDispatcher(registry)
    >>> dispatcher.add_service("users", UserService())
    >>> response = await dispatcher.request("users/get_user", {"user_id": 1})

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from .core.data.models import RequestContext, ServiceHandle, ServiceResponse
from .core.data.result import Result
from .core.utils.concurrency import ExclusiveAccessGuard
from .core.utils.exceptions import ActionNotFoundError, ExceptionFormatter
from .core.utils.logger import ModernLogger
from .registry import ActionRegistry


def split_action_path(path: str) -> Tuple[str, str]:
    """
    ``"a/b/op"`` -> ``("a/b", "op")``.
    """
    service_path, _, operation_name = path.strip().strip("/").rpartition("/")
    if not service_path or not operation_name:
        raise ValueError(f"action path must look like 'service/action', got {path!r}")
    return service_path, operation_name


class ActionDispatcher(ModernLogger):
    """
    Resolves action paths against an ``ActionRegistry`` and invokes handlers.
    """

    def __init__(self, registry: ActionRegistry) -> None:
        super().__init__(name="actionforge.ActionDispatcher")
        self.registry = registry
        self._services: Dict[str, ServiceHandle] = {}
        self._access = ExclusiveAccessGuard(name="dispatcher")

    def add_service(self, path: str, instance: Any) -> ServiceHandle:
        service_path = path.strip().strip("/")
        if not service_path:
            raise ValueError("service path cannot be empty")
        if service_path in self._services:
            raise ValueError(f"service path already in use: {service_path}")

        handle = ServiceHandle.of(instance)
        self._services[service_path] = handle
        self.info(
            "Mounted %s at '%s' with %d action(s)",
            handle.service_type.__qualname__,
            service_path,
            len(self.registry.for_service(handle.service_type)),
        )
        return handle

    def remove_service(self, path: str) -> None:
        """
        Unmount a service; refused while calls against it are in flight.
        """
        service_path = path.strip().strip("/")
        handle = self._services.get(service_path)
        if handle is None:
            return
        in_flight = self._access.active(handle.instance)
        if in_flight:
            raise RuntimeError(
                f"service '{service_path}' still has {in_flight} call(s) in flight"
            )
        del self._services[service_path]
        self._access.forget(handle.instance)

    def active_calls(self, path: str) -> int:
        handle = self._services.get(path.strip().strip("/"))
        if handle is None:
            return 0
        return self._access.active(handle.instance)

    def service_paths(self) -> List[str]:
        return sorted(self._services)

    async def invoke(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        context: Optional[RequestContext] = None,
    ) -> Result[ServiceResponse]:
        """
        Invoke one action; failures are returned, not raised.
        """
        try:
            service_path, operation_name = split_action_path(path)
        except ValueError as exc:
            return Result.err(ActionNotFoundError(str(exc)))

        handle = self._services.get(service_path)
        if handle is None:
            return Result.err(
                ActionNotFoundError(
                    f"No service mounted at '{service_path}'",
                    service_path=service_path,
                    operation_name=operation_name,
                )
            )

        descriptor = self.registry.lookup(handle.service_type, operation_name)
        if descriptor is None:
            return Result.err(
                ActionNotFoundError(
                    f"Service '{service_path}' has no action '{operation_name}'",
                    service_path=service_path,
                    operation_name=operation_name,
                )
            )

        if context is None:
            context = RequestContext(service_path=service_path, operation_name=operation_name)

        async with self._access.access(handle.instance, exclusive=descriptor.exclusive):
            result = await descriptor.invoke(handle, context, params)

        if result.is_err:
            self.warning(
                "Action %s failed: %s",
                path,
                ExceptionFormatter.format_exception_summary(result.error),
            )
        else:
            self.debug("Action %s succeeded", path)
        return result

    async def request(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        context: Optional[RequestContext] = None,
    ) -> ServiceResponse:
        """
        Like ``invoke`` but raises the carried error on failure.
        """
        result = await self.invoke(path, params, context)
        return result.unwrap()


__all__ = ["ActionDispatcher", "split_action_path"]
