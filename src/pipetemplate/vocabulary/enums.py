"""
Vocabulary enums — closed classifications shared across the pipeline.
"""

from enum import Enum


class ResourceGroup(str, Enum):
    """
    API group a resource kind belongs to.

    Resolved once at mapping time and carried on each descriptor;
    decides which creation endpoint receives the resource.
    """
    BASE = "BASE"        # Core orchestration API (/api)
    ORIGIN = "ORIGIN"    # Platform API group (/oapi)


class RunState(str, Enum):
    """Lifecycle of a single pipeline run."""
    UNPROCESSED = "UNPROCESSED"
    PROCESSED_OK = "PROCESSED_OK"
    PROCESSED_FAILED = "PROCESSED_FAILED"
    INSTANTIATED_OK = "INSTANTIATED_OK"
    INSTANTIATED_PARTIAL = "INSTANTIATED_PARTIAL"  # Some creation calls failed or were skipped
    INSTANTIATED_FAILED = "INSTANTIATED_FAILED"    # Required service gate rejected the run

    @property
    def is_terminal(self) -> bool:
        return self in (
            RunState.INSTANTIATED_OK,
            RunState.INSTANTIATED_PARTIAL,
            RunState.INSTANTIATED_FAILED,
        )


class ErrorCategory(str, Enum):
    """
    Error taxonomy.

    CONFIGURATION: caller input is wrong (missing template, bad parameter,
    missing required service).
    TRANSPORT: a collaborator call failed.
    MAPPING: an expanded object could not be turned into a descriptor.
    """
    CONFIGURATION = "CONFIGURATION"
    TRANSPORT = "TRANSPORT"
    MAPPING = "MAPPING"
    CANCELLED = "CANCELLED"
