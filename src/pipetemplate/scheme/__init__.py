"""
Scheme — Kind registry, decoding, and resource-group classification.
"""

from pipetemplate.scheme.kinds import (
    BASE_KINDS,
    ORIGIN_KINDS,
    is_kind_in_origin_group,
    classify_kind,
    kind_to_resource,
)
from pipetemplate.scheme.registry import (
    SchemeError,
    UnknownKindError,
    GroupVersionKind,
    Scheme,
    parse_api_version,
    create_default_scheme,
)
from pipetemplate.scheme.decoder import (
    DecodeError,
    AccessorError,
    TypedObject,
    UniversalDecoder,
    name_of,
)

__all__ = [
    # Kinds
    "BASE_KINDS",
    "ORIGIN_KINDS",
    "is_kind_in_origin_group",
    "classify_kind",
    "kind_to_resource",
    # Registry
    "SchemeError",
    "UnknownKindError",
    "GroupVersionKind",
    "Scheme",
    "parse_api_version",
    "create_default_scheme",
    # Decoding
    "DecodeError",
    "AccessorError",
    "TypedObject",
    "UniversalDecoder",
    "name_of",
]
