"""
In-memory collaborators — Offline template store, processor and creators.

Used by tests and for dry runs. LocalTemplateProcessor reproduces the
server-side expansion rules: generated parameters are filled from their
expressions, required parameters must have a value, and ${NAME}
references are replaced in every string of every object.
"""

import copy
import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from pipetemplate.errors import NotFoundError, TransportError
from pipetemplate.templates import (
    GENERATE_EXPRESSION,
    ExpressionValueGenerator,
    Template,
)
from pipetemplate.clients.base import RawObject


_PARAMETER_REF = re.compile(r"\$\{([a-zA-Z0-9_]+)\}")


class InMemoryTemplateStore:
    """Template store backed by a dict keyed by (namespace, name)."""

    def __init__(self, templates: list[Template] | None = None):
        self._templates: dict[tuple[str, str], Template] = {}
        for template in templates or []:
            self.add(template)

    def add(self, template: Template) -> None:
        key = (template.namespace, template.name)
        self._templates[key] = template.model_copy(deep=True)

    def get(self, namespace: str, name: str) -> Template:
        try:
            return self._templates[(namespace, name)].model_copy(deep=True)
        except KeyError:
            raise NotFoundError(f'templates "{name}" not found in namespace "{namespace}"')


class LocalTemplateProcessor:
    """Expands templates without a cluster."""

    def __init__(self, generator: ExpressionValueGenerator | None = None):
        self.generator = generator or ExpressionValueGenerator()
        self.calls: list[tuple[str, Template]] = []

    def process(self, namespace: str, template: Template) -> list[Any]:
        self.calls.append((namespace, template))
        values = self._resolve_values(template)

        result = []
        for obj in template.objects:
            expanded = _substitute(copy.deepcopy(obj), values)
            if template.labels:
                metadata = expanded.setdefault("metadata", {})
                labels = metadata.setdefault("labels", {})
                for key, value in template.labels.items():
                    labels.setdefault(key, value)
            result.append(RawObject(json.dumps(expanded).encode("utf-8")))
        return result

    def _resolve_values(self, template: Template) -> dict[str, str]:
        values: dict[str, str] = {}
        for index, param in enumerate(template.parameters):
            value = param.value
            if not value and param.generate:
                if param.generate != GENERATE_EXPRESSION:
                    raise TransportError(
                        f"parameters[{index}]: unknown generator {param.generate!r}"
                    )
                value = self.generator.generate(param.from_)
            if param.required and not value:
                raise TransportError(
                    f"parameters[{index}]: required value for {param.name!r}"
                )
            values[param.name] = value
        return values


def _substitute(node: Any, values: dict[str, str]) -> Any:
    if isinstance(node, str):
        return _PARAMETER_REF.sub(
            lambda m: values.get(m.group(1), m.group(0)), node
        )
    if isinstance(node, list):
        return [_substitute(item, values) for item in node]
    if isinstance(node, dict):
        return {key: _substitute(item, values) for key, item in node.items()}
    return node


@dataclass
class CreateCall:
    """A recorded creation request."""
    namespace: str
    resource: str
    body: bytes

    @property
    def name(self) -> str:
        return json.loads(self.body).get("metadata", {}).get("name", "")


class RecordingResourceCreator:
    """
    Records creation calls; optionally fails some of them.

    `fail_on` maps a resource type (e.g. "deploymentconfigs") to the
    exception raised when that type is created.
    """

    def __init__(
        self,
        fail_on: dict[str, BaseException] | None = None,
        on_create: Callable[[CreateCall], None] | None = None,
    ):
        self.fail_on = dict(fail_on or {})
        self.calls: list[CreateCall] = []
        self.created: list[CreateCall] = []
        self._on_create = on_create

    def create(self, namespace: str, resource: str, body: bytes) -> None:
        call = CreateCall(namespace, resource, body)
        self.calls.append(call)
        if self._on_create:
            self._on_create(call)
        if resource in self.fail_on:
            raise self.fail_on[resource]
        self.created.append(call)


@dataclass
class InMemoryCluster:
    """Bundle of in-memory collaborators for one fake cluster."""
    store: InMemoryTemplateStore = field(default_factory=InMemoryTemplateStore)
    processor: LocalTemplateProcessor = field(default_factory=LocalTemplateProcessor)
    base_creator: RecordingResourceCreator = field(default_factory=RecordingResourceCreator)
    origin_creator: RecordingResourceCreator = field(default_factory=RecordingResourceCreator)

    @property
    def create_calls(self) -> list[CreateCall]:
        return self.base_creator.calls + self.origin_creator.calls


def create_in_memory_cluster(
    templates: list[Template] | None = None,
    generator: ExpressionValueGenerator | None = None,
) -> InMemoryCluster:
    """Factory for an in-memory cluster preloaded with templates."""
    return InMemoryCluster(
        store=InMemoryTemplateStore(templates),
        processor=LocalTemplateProcessor(generator),
    )
