#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for the explicitly invoked parameter extraction capability.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import asyncio

import pytest

from actionforge.core.config import create_config, set_config
from actionforge.core.data import RequestContext, ServiceHandle
from actionforge.core.extraction import generate_parameter_extraction
from actionforge.core.signature import AnnotatedFunction, Parameter, extract_parameters
from actionforge.core.utils.exceptions import MissingParameterError
from actionforge.decorators import action, get_action_definition


class ProfileService:
    @action
    async def update_profile(self, context, user_id: int, display_name: str):
        return {"context": context, "user_id": user_id, "display_name": display_name}


def _parameters(*names):
    return [Parameter(name=name, declared_type="", is_reference=False) for name in names]


def test_context_parameters_are_skipped():
    extractor = generate_parameter_extraction(
        _parameters("context", "ctx", "_context", "_ctx", "user_id")
    )

    assert extractor.parameter_names == ["user_id"]
    assert len(extractor) == 1


def test_extractor_looks_up_every_parameter_by_name():
    function = AnnotatedFunction.from_callable(ProfileService.update_profile)
    extractor = generate_parameter_extraction(extract_parameters(function))

    values = extractor({"user_id": 3, "display_name": "ada", "ignored": True})

    assert values == {"user_id": 3, "display_name": "ada"}
    assert [step.declared_type for step in extractor.steps] == ["int", "str"]


def test_missing_parameter_raises_with_its_name():
    extractor = generate_parameter_extraction(_parameters("user_id", "display_name"))

    with pytest.raises(MissingParameterError) as exc_info:
        extractor({"user_id": 3})

    assert exc_info.value.parameter_name == "display_name"
    assert str(exc_info.value) == "Missing required parameter: display_name"


def test_missing_parameter_bag_reports_first_parameter():
    extractor = generate_parameter_extraction(_parameters("user_id"))

    with pytest.raises(MissingParameterError, match="user_id"):
        extractor(None)


def test_render_emits_one_statement_per_parameter():
    extractor = generate_parameter_extraction(_parameters("ctx", "user_id", "limit"))

    assert extractor.render() == (
        "user_id = extract_parameter(params, 'user_id', 'Missing required parameter: user_id')\n"
        "limit = extract_parameter(params, 'limit', 'Missing required parameter: limit')"
    )


def test_custom_context_names():
    extractor = generate_parameter_extraction(_parameters("request", "user_id"), context_names=("request",))

    assert extractor.parameter_names == ["user_id"]


def test_context_names_default_to_process_config():
    set_config(create_config(context_parameter_names=("request",)))

    extractor = generate_parameter_extraction(_parameters("request", "context", "user_id"))

    assert extractor.parameter_names == ["context", "user_id"]


def test_generated_handlers_do_not_extract_named_parameters():
    descriptor = get_action_definition(ProfileService.update_profile).bind(ProfileService)
    context = RequestContext(service_path="profiles", operation_name="update_profile")
    params = {"user_id": 3, "display_name": "ada"}

    result = asyncio.run(
        descriptor.invoke(ServiceHandle.of(ProfileService()), context, params)
    )

    # Handlers call method(context, params); named parameters are not extracted.
    assert result.is_err
    assert str(result.error) == "Error executing update_profile"
    assert isinstance(result.error.__cause__, TypeError)
