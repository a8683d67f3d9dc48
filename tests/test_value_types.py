#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for result, response and conversion value types.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from dataclasses import dataclass
from enum import Enum

import pytest

from actionforge.core.data import (
    RequestContext,
    Result,
    ServiceHandle,
    ServiceResponse,
    extract_parameter,
    to_value,
)
from actionforge.core.utils.exceptions import (
    ActionExecutionError,
    ExceptionFormatter,
    ExceptionTranslator,
    MissingParameterError,
    TypeMismatchError,
)


class Color(Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


class Money:
    def __init__(self, cents):
        self.cents = cents

    def to_value(self):
        return {"cents": self.cents}


def test_result_ok_and_err():
    ok = Result.ok(3)
    err = Result.err(ValueError("boom"))

    assert ok.is_ok and not ok.is_err
    assert ok.unwrap() == 3
    assert err.is_err and err.value is None
    assert err.unwrap_or("fallback") == "fallback"
    with pytest.raises(ValueError, match="boom"):
        err.unwrap()


def test_result_err_requires_exception():
    with pytest.raises(TypeError):
        Result.err("not an exception")


def test_result_map_and_map_err():
    assert Result.ok(2).map(lambda v: v * 10) == Result.ok(20)

    error = KeyError("k")
    mapped = Result.err(error).map_err(lambda e: RuntimeError(str(e)))
    assert isinstance(mapped.error, RuntimeError)
    assert Result.err(error).map(lambda v: v).error is error


def test_service_response_constructors():
    success = ServiceResponse.success("done", {"a": 1})
    failure = ServiceResponse.error(404, "missing")

    assert success.is_success and success.status == 200
    assert not failure.is_success and failure.data is None
    with pytest.raises(ValueError):
        ServiceResponse.error(200, "not an error")


def test_to_value_converts_nested_structures():
    payload = {
        "point": Point(1, 2),
        "color": Color.RED,
        "tags": ("a", "b"),
        "price": Money(250),
        1: None,
    }

    assert to_value(payload) == {
        "point": {"x": 1, "y": 2},
        "color": "red",
        "tags": ["a", "b"],
        "price": {"cents": 250},
        "1": None,
    }
    assert to_value({"b", "a"}) == ["a", "b"]
    assert to_value(b"raw") == b"raw"


def test_extract_parameter():
    assert extract_parameter({"id": 0}, "id") == 0
    with pytest.raises(MissingParameterError, match="Missing required parameter: id"):
        extract_parameter({}, "id")


def test_service_handle_downcast():
    point = Point(0, 0)
    handle = ServiceHandle.of(point)

    assert handle.downcast(Point).unwrap() is point
    mismatch = handle.downcast(Color)
    assert isinstance(mismatch.error, TypeMismatchError)


def test_request_context_defaults():
    first = RequestContext(service_path="users", operation_name="get_user")
    second = RequestContext(service_path="users", operation_name="get_user")

    assert first.path == "users/get_user"
    assert first.request_id != second.request_id


def test_translator_chains_original_error():
    original = LookupError("missing row")

    translated = ExceptionTranslator.as_action_execution_error(original, operation_name="get_user")

    assert isinstance(translated, ActionExecutionError)
    assert translated.__cause__ is original
    assert translated.to_dict()["context"] == {"operation_name": "get_user"}
    assert ExceptionFormatter.format_exception_summary(translated) == (
        "ActionExecutionError: Error executing get_user <- caused by: LookupError: missing row"
    )
