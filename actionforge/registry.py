#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Explicit, append-only registry of operation descriptors.

Hosts create a registry, register their service classes during start-up
and hand it to a dispatcher. Descriptors are never removed or replaced;
registration order is preserved and observable through ``descriptors()``.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import threading
from typing import Dict, Iterator, List, Optional, Tuple

from .core.synthesis import OperationDescriptor
from .core.utils.exceptions import DuplicateActionError
from .core.utils.logger import ModernLogger
from .decorators import collect_actions

RegistryKey = Tuple[type, str]


class ActionRegistry(ModernLogger):
    """
    Collects ``OperationDescriptor`` records indexed by service type and
    operation name.
    """

    def __init__(self, name: str = "ActionRegistry") -> None:
        super().__init__(name=f"actionforge.{name}")
        self._lock = threading.Lock()
        self._ordered: List[OperationDescriptor] = []
        self._index: Dict[RegistryKey, OperationDescriptor] = {}

    def submit(self, descriptor: OperationDescriptor) -> OperationDescriptor:
        """
        Append one descriptor; a second one for the same key is rejected.
        """
        key = (descriptor.service_type, descriptor.operation_name)
        with self._lock:
            if key in self._index:
                raise DuplicateActionError(
                    f"Action '{descriptor.operation_name}' is already registered "
                    f"for {descriptor.service_type.__qualname__}",
                    service_type=descriptor.service_type.__qualname__,
                    operation_name=descriptor.operation_name,
                )
            self._index[key] = descriptor
            self._ordered.append(descriptor)

        self.debug(
            "Registered action %s/%s -> %s",
            descriptor.service_type.__qualname__,
            descriptor.operation_name,
            descriptor.method_name,
        )
        return descriptor

    def register_service(self, service_cls: type) -> List[OperationDescriptor]:
        """
        Submit every ``@action`` of ``service_cls`` in definition order.

        Nothing is submitted when any of them collides with an existing entry.
        """
        descriptors = collect_actions(service_cls)

        names = [descriptor.operation_name for descriptor in descriptors]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise DuplicateActionError(
                f"{service_cls.__qualname__} declares action name(s) more than once: "
                f"{', '.join(duplicates)}",
                service_type=service_cls.__qualname__,
                operation_name=duplicates[0],
            )
        for descriptor in descriptors:
            if (service_cls, descriptor.operation_name) in self._index:
                raise DuplicateActionError(
                    f"Action '{descriptor.operation_name}' is already registered "
                    f"for {service_cls.__qualname__}",
                    service_type=service_cls.__qualname__,
                    operation_name=descriptor.operation_name,
                )

        for descriptor in descriptors:
            self.submit(descriptor)

        self.info(
            "Registered %d action(s) for %s", len(descriptors), service_cls.__qualname__
        )
        return descriptors

    def lookup(self, service_type: type, operation_name: str) -> Optional[OperationDescriptor]:
        return self._index.get((service_type, operation_name))

    def for_service(self, service_type: type) -> List[OperationDescriptor]:
        return [d for d in self._ordered if d.service_type is service_type]

    def operation_names(self, service_type: type) -> List[str]:
        return [d.operation_name for d in self.for_service(service_type)]

    def descriptors(self) -> Tuple[OperationDescriptor, ...]:
        return tuple(self._ordered)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[OperationDescriptor]:
        return iter(self.descriptors())

    def __len__(self) -> int:
        return len(self._ordered)


__all__ = ["ActionRegistry"]
