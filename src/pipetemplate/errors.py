"""
Errors — Exception hierarchy for template instantiation.

Errors are mostly collected into outcomes rather than raised, so every
class carries its ErrorCategory for callers inspecting the collected list.
"""

from typing import TYPE_CHECKING

from pipetemplate.vocabulary import ErrorCategory

if TYPE_CHECKING:
    from pipetemplate.pipeline.instantiator import InstantiationResult


class PipelineError(Exception):
    """Base exception for pipeline errors."""
    category: ErrorCategory = ErrorCategory.CONFIGURATION


# =============================================================================
# CONFIGURATION: caller input is wrong
# =============================================================================

class ConfigurationError(PipelineError):
    category = ErrorCategory.CONFIGURATION


class TemplateNotFoundError(ConfigurationError):
    """The template does not exist in the source namespace."""

    def __init__(self, namespace: str, template_name: str):
        self.namespace = namespace
        self.template_name = template_name
        super().__init__(f"pipeline template {namespace}/{template_name} not found")


class EmptyParameterNameError(ConfigurationError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"template parameter name cannot be empty ({value!r})")


class UnknownParameterError(ConfigurationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown parameter {name!r} specified for template")


class RequiredServiceMissingError(ConfigurationError):
    def __init__(self, namespace: str, template_name: str, service_name: str):
        self.namespace = namespace
        self.template_name = template_name
        self.service_name = service_name
        super().__init__(
            f"template {namespace}/{template_name} does not contain "
            f"required service {service_name!r}"
        )


# =============================================================================
# TRANSPORT: a collaborator call failed
# =============================================================================

class TransportError(PipelineError):
    """A store, processor or creator call failed. Wraps the underlying cause."""
    category = ErrorCategory.TRANSPORT

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)


class NotFoundError(TransportError):
    """Raised by collaborators when the requested object does not exist."""


class ProcessingError(TransportError):
    """Submitting the template for expansion failed."""

    def __init__(self, namespace: str, template_name: str, cause: BaseException | None = None):
        self.namespace = namespace
        self.template_name = template_name
        super().__init__(
            f"processing template {namespace}/{template_name} failed: {cause}",
            cause,
        )


class ResourceCreateError(TransportError):
    """A single creation call failed."""

    def __init__(self, kind: str, name: str, cause: BaseException | None = None):
        self.kind = kind
        self.name = name
        super().__init__(f"creating component {kind}/{name} failed: {cause}", cause)


# =============================================================================
# MAPPING: an expanded object could not be classified
# =============================================================================

class MappingError(PipelineError):
    category = ErrorCategory.MAPPING

    def __init__(self, message: str, index: int | None = None):
        self.index = index
        super().__init__(message)


# =============================================================================
# INSTANTIATION: aggregate errors raised by instantiate()
# =============================================================================

class InstantiationError(PipelineError):
    """Summary error raised by instantiate(); details live in errors()."""
    category = ErrorCategory.TRANSPORT

    def __init__(self, message: str, result: "InstantiationResult | None" = None):
        self.result = result
        super().__init__(message)


class InstantiationCancelledError(InstantiationError):
    category = ErrorCategory.CANCELLED


class CreationCancelledError(PipelineError):
    """Recorded when the creation loop stops before reaching every item."""
    category = ErrorCategory.CANCELLED

    def __init__(self, remaining: int, reason: str = "cancelled"):
        self.remaining = remaining
        super().__init__(f"instantiation {reason} with {remaining} components not attempted")
