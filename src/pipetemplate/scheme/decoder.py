"""
Universal Decoder — Raw object bytes to typed objects.

Decoding reads only the envelope (apiVersion, kind, metadata); the rest of
the body is kept as extra fields and never rewritten.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pipetemplate.templates.models import ObjectMeta
from pipetemplate.scheme.registry import Scheme, SchemeError


class DecodeError(SchemeError):
    pass


class AccessorError(SchemeError):
    pass


class TypedObject(BaseModel):
    """Decoded cluster object."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field("", alias="apiVersion")
    kind: str = ""
    metadata: ObjectMeta | None = None


class UniversalDecoder:
    """
    Decodes any kind registered in the scheme.

    With `strict` (default) an apiVersion/kind pair the scheme does not
    know is a decode error; otherwise the object decodes and kind
    resolution rejects it later.
    """

    def __init__(self, scheme: Scheme, strict: bool = True):
        self.scheme = scheme
        self.strict = strict

    def decode(self, data: bytes) -> TypedObject:
        try:
            payload: Any = json.loads(data)
        except (TypeError, ValueError, RecursionError) as e:
            raise DecodeError(f"invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise DecodeError(f"expected a JSON object, got {type(payload).__name__}")
        if not payload.get("kind"):
            raise DecodeError("object 'kind' is missing")
        if not payload.get("apiVersion"):
            raise DecodeError("object 'apiVersion' is missing")

        try:
            obj = TypedObject.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(str(e)) from e

        if self.strict and not self.scheme.recognizes(obj.api_version, obj.kind):
            raise DecodeError(
                f"no kind {obj.kind!r} is registered for version {obj.api_version!r}"
            )
        return obj


def name_of(obj: TypedObject) -> str:
    """
    Read the object's name.

    Objects that only carry generateName are rejected: the creation call
    needs a concrete name to report against.
    """
    if obj.metadata is None:
        raise AccessorError(f"{obj.kind} has no metadata")
    if not obj.metadata.name:
        raise AccessorError(f"{obj.kind} has no metadata.name")
    return obj.metadata.name
