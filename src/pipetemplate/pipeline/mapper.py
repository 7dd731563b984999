"""
Expansion & Resource Mapper — Turn a substituted template into resource descriptors.

Expansion is delegated to the template processor. Each returned object is
then decoded, its kind resolved and pluralized, its name read, and its
API group classified. Mapping failures are per object: a bad object is
reported and skipped, its siblings are still mapped.
"""

from dataclasses import dataclass
from typing import Any

from pipetemplate.clients import RawObject, TemplateProcessor
from pipetemplate.errors import MappingError, PipelineError, ProcessingError
from pipetemplate.observability import get_logger
from pipetemplate.scheme import (
    AccessorError,
    DecodeError,
    Scheme,
    UniversalDecoder,
    UnknownKindError,
    create_default_scheme,
    kind_to_resource,
    name_of,
)
from pipetemplate.templates import Template
from pipetemplate.vocabulary import ResourceGroup


logger = get_logger("pipeline.mapper")


@dataclass(frozen=True)
class ResourceMapping:
    """
    Creation-ready descriptor for one expanded object.

    `raw_json` is exactly what the processor returned and is sent as the
    creation body unchanged. `index` is the object's position in the
    expansion output.
    """
    index: int
    name: str
    kind: str
    resource: str
    raw_json: bytes
    group: ResourceGroup

    @property
    def is_origin(self) -> bool:
        return self.group == ResourceGroup.ORIGIN


class ResourceMapper:
    """Maps expanded objects to ResourceMapping descriptors."""

    def __init__(self, scheme: Scheme | None = None, decoder: UniversalDecoder | None = None):
        self.scheme = scheme or create_default_scheme()
        self.decoder = decoder or UniversalDecoder(self.scheme)

    def map(self, objects: list[Any]) -> tuple[list[ResourceMapping], list[MappingError]]:
        """
        Map every object, in order.

        Returns the successful mappings (each keeping its original index)
        and one MappingError per object that could not be mapped.
        """
        result: list[ResourceMapping] = []
        errors: list[MappingError] = []

        for index, item in enumerate(objects):
            try:
                result.append(self.map_one(index, item))
            except MappingError as e:
                logger.warning("Skipping object %d: %s", index, e)
                errors.append(e)

        return result, errors

    def map_one(self, index: int, item: Any) -> ResourceMapping:
        if not isinstance(item, RawObject):
            raise MappingError(f"unable to convert {item!r} to unknown object", index)

        try:
            obj = self.decoder.decode(item.raw)
        except DecodeError as e:
            raise MappingError(f"unable to decode {item.raw!r}: {e}", index) from e

        try:
            gvk = self.scheme.object_kind(obj)
        except UnknownKindError as e:
            raise MappingError(f"unknown kind {obj!r}: {e}", index) from e

        try:
            name = name_of(obj)
        except AccessorError as e:
            raise MappingError(f"unknown name {obj!r}: {e}", index) from e

        return ResourceMapping(
            index=index,
            name=name,
            kind=gvk.kind,
            resource=kind_to_resource(gvk.kind),
            raw_json=item.raw,
            group=gvk.resource_group,
        )


def expand_template(
    processor: TemplateProcessor,
    target_namespace: str,
    template: Template,
    mapper: ResourceMapper,
    source: tuple[str, str] | None = None,
) -> tuple[list[ResourceMapping], list[PipelineError]]:
    """
    Expand `template` in the target namespace and map the result.

    A failed expansion call yields a single ProcessingError and no
    mappings; `source` names the template coordinates in that error.
    """
    namespace, name = source or (template.namespace, template.name)
    try:
        objects = processor.process(target_namespace, template)
    except Exception as e:
        return [], [ProcessingError(namespace, name, e)]

    logger.info(
        "Expanded template %s/%s into %d objects", namespace, name, len(objects)
    )
    mappings, errors = mapper.map(objects)
    return mappings, list(errors)
