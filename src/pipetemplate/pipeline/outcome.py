"""
Outcome — Append-only error accumulator for one pipeline stage.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from pipetemplate.errors import PipelineError
from pipetemplate.vocabulary import ErrorCategory


@dataclass
class Outcome:
    """
    Ordered errors collected by a stage.

    Errors are only ever appended; nothing is removed or reordered.
    """
    stage: str
    errors: list[PipelineError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, error: PipelineError) -> None:
        self.errors.append(error)

    def extend(self, errors: Iterable[PipelineError]) -> None:
        self.errors.extend(errors)

    def by_category(self, category: ErrorCategory) -> list[PipelineError]:
        return [e for e in self.errors if e.category == category]

    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]

    def __iter__(self) -> Iterator[PipelineError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)
