#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for generated action handlers.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import asyncio
from dataclasses import dataclass, field
from typing import List

import pytest

from actionforge.core.data import RequestContext, Result, ServiceHandle, ServiceResponse
from actionforge.core.returns import ReturnShape
from actionforge.core.signature import ReceiverKind
from actionforge.core.synthesis import synthesize
from actionforge.core.utils.exceptions import ActionExecutionError, TypeMismatchError
from actionforge.decorators import action, get_action_definition


@dataclass
class PostsData:
    titles: List[str] = field(default_factory=list)


class UnconvertibleReport:
    def to_value(self):
        raise RuntimeError("cannot convert")


class UserService:
    def __init__(self):
        self.calls = []

    @action(name="get_user")
    async def get_user_by_id(self, context, params) -> Result[ServiceResponse]:
        self.calls.append(("get_user", params))
        if params.get("missing"):
            return Result.err(LookupError("no such user"))
        if params.get("explode"):
            raise RuntimeError("database offline")
        return Result.ok(ServiceResponse.success("User found", {"id": params["user_id"]}))

    @action
    async def get_posts(self, context, params) -> Result[PostsData]:
        self.calls.append(("get_posts", params))
        if params and params.get("fail"):
            return Result.err(PermissionError("posts are private"))
        return Result.ok(PostsData(titles=["hello", "world"]))

    @action
    async def count_users(self, context, params) -> int:
        self.calls.append(("count_users", params))
        return 2

    @action
    async def ping(self, context, params):
        return None

    @action
    async def stream_ids(self, context, params):
        for value in range(3):
            yield value

    @action
    async def misbehave(self, context, params) -> int:
        raise ValueError("bad input")

    @action
    async def export_report(self, context, params) -> int:
        return UnconvertibleReport()


class OtherService:
    pass


def _descriptor(method, owner=UserService):
    return synthesize(get_action_definition(method), owner)


def _context(operation_name="op"):
    return RequestContext(service_path="users", operation_name=operation_name)


def _invoke(descriptor, instance, params=None):
    return asyncio.run(
        descriptor.invoke(ServiceHandle.of(instance), _context(descriptor.operation_name), params)
    )


def test_wrapped_response_passes_result_through_unchanged():
    descriptor = _descriptor(UserService.get_user_by_id)
    service = UserService()

    result = _invoke(descriptor, service, {"user_id": 7})

    assert descriptor.operation_name == "get_user"
    assert descriptor.shape is ReturnShape.WRAPPED_RESPONSE
    assert result.is_ok
    response = result.value
    assert isinstance(response, ServiceResponse)
    assert response.message == "User found"
    assert response.data == {"id": 7}


def test_wrapped_response_failure_gets_operation_context():
    descriptor = _descriptor(UserService.get_user_by_id)

    result = _invoke(descriptor, UserService(), {"user_id": 7, "missing": True})

    assert result.is_err
    assert isinstance(result.error, ActionExecutionError)
    assert str(result.error) == "Error executing get_user"
    assert result.error.operation_name == "get_user"
    assert isinstance(result.error.__cause__, LookupError)


def test_raised_exception_becomes_contextual_error_value():
    descriptor = _descriptor(UserService.get_user_by_id)

    result = _invoke(descriptor, UserService(), {"user_id": 7, "explode": True})

    assert result.is_err
    assert str(result.error) == "Error executing get_user"
    assert isinstance(result.error.__cause__, RuntimeError)


def test_raw_result_success_is_wrapped_with_converted_payload():
    descriptor = _descriptor(UserService.get_posts)

    result = _invoke(descriptor, UserService(), {})

    assert descriptor.operation_name == "get_posts"
    assert descriptor.shape is ReturnShape.RAW_RESULT
    response = result.unwrap()
    assert response.status == 200
    assert response.message == "Operation succeeded"
    assert response.data == {"titles": ["hello", "world"]}


def test_raw_result_error_branch_gets_operation_context():
    descriptor = _descriptor(UserService.get_posts)

    result = _invoke(descriptor, UserService(), {"fail": True})

    assert str(result.error) == "Error executing get_posts"
    assert isinstance(result.error.__cause__, PermissionError)


def test_raw_value_is_wrapped():
    descriptor = _descriptor(UserService.count_users)

    response = _invoke(descriptor, UserService(), {}).unwrap()

    assert descriptor.shape is ReturnShape.RAW
    assert response.message == "Operation succeeded"
    assert response.data == 2


def test_unannotated_none_return_is_wrapped_without_payload():
    response = _invoke(_descriptor(UserService.ping), UserService()).unwrap()

    assert response.message == "Operation succeeded"
    assert response.data is None


def test_async_generator_output_is_collected():
    response = _invoke(_descriptor(UserService.stream_ids), UserService()).unwrap()

    assert response.data == [0, 1, 2]


def test_raw_method_exception_gets_operation_context():
    result = _invoke(_descriptor(UserService.misbehave), UserService())

    assert str(result.error) == "Error executing misbehave"
    assert isinstance(result.error.__cause__, ValueError)


def test_type_mismatch_is_returned_and_method_is_not_called():
    descriptor = _descriptor(UserService.get_user_by_id)
    stranger = OtherService()
    stranger.calls = []

    result = _invoke(descriptor, stranger, {"user_id": 1})

    assert result.is_err
    assert isinstance(result.error, TypeMismatchError)
    assert str(result.error) == "Service type mismatch in action handler"
    assert result.error.expected_type == "UserService"
    assert result.error.actual_type == "OtherService"
    assert stranger.calls == []


def test_subclass_instance_does_not_match_exact_owner():
    class SpecialUserService(UserService):
        pass

    descriptor = _descriptor(UserService.count_users)
    service = SpecialUserService()

    result = _invoke(descriptor, service, {})

    assert isinstance(result.error, TypeMismatchError)
    assert service.calls == []


def test_handler_ignores_operation_argument_and_uses_bound_name():
    descriptor = _descriptor(UserService.get_posts)

    result = asyncio.run(
        descriptor.handler(ServiceHandle.of(UserService()), _context(), "renamed", {"fail": True})
    )

    assert str(result.error) == "Error executing get_posts"


def test_descriptor_records_owner_and_receiver():
    descriptor = _descriptor(UserService.get_posts)

    assert descriptor.service_type is UserService
    assert descriptor.receiver is ReceiverKind.BY_REFERENCE
    assert descriptor.exclusive is False
    assert descriptor.method_name == "get_posts"


def test_synthesize_requires_a_class_owner():
    with pytest.raises(TypeError):
        synthesize(get_action_definition(UserService.get_posts), UserService())


def test_each_binding_produces_an_independent_handler():
    definition = get_action_definition(UserService.get_posts)

    first = definition.bind(UserService)
    second = definition.bind(UserService)

    assert first.handler is not second.handler
    assert first.operation_name == second.operation_name


def test_payload_conversion_failure_becomes_contextual_error_value():
    result = _invoke(_descriptor(UserService.export_report), UserService())

    assert result.is_err
    assert str(result.error) == "Error executing export_report"
    assert isinstance(result.error.__cause__, RuntimeError)
    assert str(result.error.__cause__) == "cannot convert"
