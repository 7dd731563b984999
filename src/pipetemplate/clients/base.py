"""
Collaborator protocols — Template storage, expansion, and resource creation.

Implementations raise NotFoundError when an object is missing and
TransportError for any other failure.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pipetemplate.templates import Template


@dataclass(frozen=True)
class RawObject:
    """An expanded object still in its serialized form."""
    raw: bytes


@runtime_checkable
class TemplateStore(Protocol):
    """Reads stored templates."""

    def get(self, namespace: str, name: str) -> Template:
        ...


@runtime_checkable
class TemplateProcessor(Protocol):
    """
    Expands a template server-side.

    Returns the rendered objects in template order. Well-behaved processors
    return RawObject items; anything else is rejected during mapping.
    """

    def process(self, namespace: str, template: Template) -> list[Any]:
        ...


@runtime_checkable
class ResourceCreator(Protocol):
    """Creates one resource from its exact serialized body."""

    def create(self, namespace: str, resource: str, body: bytes) -> None:
        ...
