"""
Parameter Substitution — Apply caller-supplied values onto a template.
"""

from typing import Mapping

from pipetemplate.errors import (
    PipelineError,
    EmptyParameterNameError,
    UnknownParameterError,
)
from pipetemplate.templates.models import Template


def substitute_parameters(
    template: Template,
    values: Mapping[str, str],
) -> tuple[Template, list[PipelineError]]:
    """
    Return a copy of `template` with `values` applied, plus validation errors.

    Each entry is handled independently: an empty or undeclared name is
    reported and skipped, every other entry is applied. Applied parameters
    lose their generation directive so the explicit value is never
    replaced during expansion. The input template is not modified.
    """
    result = template.model_copy(deep=True)
    errors: list[PipelineError] = []

    for name, value in values.items():
        if not name:
            errors.append(EmptyParameterNameError(value))
            continue

        param = result.get_parameter(name)
        if param is None:
            errors.append(UnknownParameterError(name))
            continue

        result.set_parameter(param.model_copy(update={"value": value, "generate": ""}))

    return result, errors
