"""
Templates — Parameterized resource bundles and parameter handling.
"""

from pipetemplate.templates.models import (
    GENERATE_EXPRESSION,
    TemplateParameter,
    ObjectMeta,
    Template,
)
from pipetemplate.templates.parameters import substitute_parameters
from pipetemplate.templates.generator import ExpressionValueGenerator

__all__ = [
    # Models
    "GENERATE_EXPRESSION",
    "TemplateParameter",
    "ObjectMeta",
    "Template",
    # Substitution
    "substitute_parameters",
    # Generation
    "ExpressionValueGenerator",
]
