"""
Vocabulary — Enumerated types forming the shared language of the pipeline.
"""

from pipetemplate.vocabulary.enums import (
    ResourceGroup,
    RunState,
    ErrorCategory,
)

__all__ = [
    "ResourceGroup",
    "RunState",
    "ErrorCategory",
]
