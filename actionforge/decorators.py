#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
The ``@action`` decorator and class scanning helpers.

Decorating a method runs the whole analysis pipeline once, while the class
body executes: option parsing, signature validation and return-type
classification. The method itself is returned untouched with an
``ActionDefinition`` attached. Registration is explicit: a host passes the
class to ``ActionRegistry.register_service`` (or calls
``collect_actions``) during its start-up phase.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import inspect
from typing import Any, Callable, Iterator, List, Mapping, Optional, TypeVar, Union, cast

from .core.attributes import parse_attribute_options, resolve_operation_name
from .core.config import ActionForgeConfig, get_config
from .core.returns import classify_return
from .core.signature import AnnotatedFunction, validate_signature
from .core.synthesis import ActionDefinition, OperationDescriptor
from .core.utils.exceptions import InvalidSignatureError
from .core.utils.logger import ModernLogger

T = TypeVar("T", bound=Callable[..., Any])

_ACTION_ATTR = "__actionforge_action__"

_logger = ModernLogger(name="actionforge.decorators")


def build_action_definition(
    func: Callable[..., Any],
    tokens: Union[str, Mapping[str, Any], None] = None,
    config: Optional[ActionForgeConfig] = None,
) -> ActionDefinition:
    """
    Analyse ``func`` and return its action definition.

    Raises ``InvalidSignatureError`` when ``func`` is not an async method.
    """
    config = config or get_config()

    options = parse_attribute_options(tokens)
    signature = AnnotatedFunction.from_callable(func)
    receiver = validate_signature(signature)

    operation_name = resolve_operation_name(options, signature.name)
    shape = classify_return(
        signature.returns,
        response_type_name=config.response_type_name,
        result_type_name=config.result_type_name,
    )

    return ActionDefinition(
        operation_name=operation_name,
        function=getattr(func, "__func__", func),
        signature=signature,
        receiver=receiver,
        shape=shape,
        success_message=config.success_message,
        options=tuple(sorted(options.items())),
    )


def action(
    func: Union[Callable[..., Any], str, None] = None,
    *,
    name: Optional[str] = None,
    **options: Any,
) -> Union[Callable[[T], T], T]:
    """
    Mark an async service method as a remotely invokable action.

    Supported forms:
    - ``@action``: operation name is the method name
    - ``@action(name="get_user")``: explicit operation name
    - ``@action('name = "get_user"')``: raw option string

    Unknown options are ignored. A malformed option string falls back to the
    method name instead of failing.
    """
    tokens: Union[str, Mapping[str, Any]]
    if isinstance(func, str):
        tokens = func
        func = None
    else:
        tokens = dict(options)
        if name is not None:
            tokens["name"] = name

    def decorator(target: T) -> T:
        try:
            definition = build_action_definition(target, tokens)
        except InvalidSignatureError as exc:
            _logger.error(exc.format_diagnostic())
            raise

        setattr(getattr(target, "__func__", target), _ACTION_ATTR, definition)
        _logger.debug(
            "Registered action definition '%s' for %s",
            definition.operation_name,
            definition.signature.qualname,
        )
        return target

    if func is not None and callable(func):
        return decorator(cast(T, func))
    return decorator


def get_action_definition(member: Any) -> Optional[ActionDefinition]:
    target = getattr(member, "__func__", member)
    definition = getattr(target, _ACTION_ATTR, None)
    if isinstance(definition, ActionDefinition):
        return definition
    return None


def iter_action_definitions(service_cls: type) -> Iterator[ActionDefinition]:
    """
    Yield the action definitions visible on ``service_cls``.

    Base-class actions come first, each class in definition order. An
    override without ``@action`` hides the inherited action.
    """
    seen_names = set()
    seen_definitions = set()
    for klass in reversed(service_cls.__mro__):
        for attr_name in vars(klass):
            if attr_name in seen_names:
                continue
            seen_names.add(attr_name)

            member = inspect.getattr_static(service_cls, attr_name)
            definition = get_action_definition(member)
            if definition is None or id(definition) in seen_definitions:
                continue
            seen_definitions.add(id(definition))
            yield definition


def collect_actions(service_cls: type) -> List[OperationDescriptor]:
    """
    Bind every action on ``service_cls`` into an ``OperationDescriptor``.
    """
    if not isinstance(service_cls, type):
        raise TypeError(f"collect_actions expects a class, got {service_cls!r}")
    return [definition.bind(service_cls) for definition in iter_action_definitions(service_cls)]


__all__ = [
    "action",
    "build_action_definition",
    "collect_actions",
    "get_action_definition",
    "iter_action_definitions",
]
