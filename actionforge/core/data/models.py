#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Request/response value types shared by services and the dispatcher.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..utils.exceptions import TypeMismatchError
from .result import Result


@dataclass
class ServiceResponse:
    """
    Normalized response envelope returned for every action invocation.
    """

    status: int
    message: str
    data: Optional[Any] = None

    @classmethod
    def success(cls, message: str, data: Optional[Any] = None) -> "ServiceResponse":
        return cls(status=200, message=message, data=data)

    @classmethod
    def error(cls, status: int, message: str) -> "ServiceResponse":
        if status < 400:
            raise ValueError(f"error responses need a status >= 400, got {status}")
        return cls(status=status, message=message)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class RequestContext:
    """
    Per-request metadata handed to action methods alongside the params.
    """

    service_path: str
    operation_name: str
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return f"{self.service_path}/{self.operation_name}"


@dataclass(frozen=True)
class ServiceHandle:
    """
    Type-erased service reference: the concrete type tag travels with the
    untyped instance so handlers can check it before touching the instance.
    """

    service_type: type
    instance: Any

    @classmethod
    def of(cls, instance: Any) -> "ServiceHandle":
        return cls(service_type=type(instance), instance=instance)

    def downcast(self, expected: type) -> Result[Any]:
        """
        Return the instance when the tag is exactly ``expected``.
        """
        if self.service_type is expected and type(self.instance) is expected:
            return Result.ok(self.instance)
        return Result.err(
            TypeMismatchError(
                expected_type=expected.__qualname__,
                actual_type=self.service_type.__qualname__,
            )
        )
