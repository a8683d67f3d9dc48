#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Per-parameter extraction from a request's parameter bag.

Generated handlers hand action methods the raw ``params`` mapping; they do
not call into this module. Integrators that want typed, named arguments
can build an extractor explicitly:

    >>> function = AnnotatedFunction.from_callable(UserService.get_user)
    >>> extractor = generate_parameter_extraction(extract_parameters(function))
    >>> extractor({"user_id": 7})
    {'user_id': 7}

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import get_config
from .data.values import extract_parameter
from .signature import Parameter


@dataclass(frozen=True)
class ExtractionStep:
    name: str
    declared_type: str
    message: str

    def render(self, params_name: str = "params") -> str:
        return f"{self.name} = extract_parameter({params_name}, {self.name!r}, {self.message!r})"


class ParameterExtractor:
    """
    Ordered extraction steps for one action method.
    """

    def __init__(self, steps: Sequence[ExtractionStep]) -> None:
        self._steps: Tuple[ExtractionStep, ...] = tuple(steps)

    @property
    def steps(self) -> Tuple[ExtractionStep, ...]:
        return self._steps

    @property
    def parameter_names(self) -> List[str]:
        return [step.name for step in self._steps]

    def __call__(self, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Look every parameter up; the first missing one raises
        ``MissingParameterError``.
        """
        return {
            step.name: extract_parameter(params, step.name, step.message)
            for step in self._steps
        }

    def render(self, params_name: str = "params") -> str:
        """
        The extraction as Python statements, one per parameter.
        """
        return "\n".join(step.render(params_name) for step in self._steps)

    def __len__(self) -> int:
        return len(self._steps)


def generate_parameter_extraction(
    parameters: Iterable[Parameter],
    context_names: Optional[Iterable[str]] = None,
) -> ParameterExtractor:
    if context_names is None:
        context_names = get_config().context_parameter_names
    skipped = frozenset(context_names)
    steps = [
        ExtractionStep(
            name=parameter.name,
            declared_type=parameter.declared_type,
            message=f"Missing required parameter: {parameter.name}",
        )
        for parameter in parameters
        if parameter.name not in skipped
    ]
    return ParameterExtractor(steps)


__all__ = ["ExtractionStep", "ParameterExtractor", "generate_parameter_extraction"]
