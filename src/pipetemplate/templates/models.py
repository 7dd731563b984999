"""
Template Models — Parameterized bundles of cluster resources.

A template declares named parameters and carries an opaque list of object
definitions. The object bodies are never interpreted here; only the
expansion step reads them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


GENERATE_EXPRESSION = "expression"


class TemplateParameter(BaseModel):
    """
    Single declared template parameter.

    `generate` names an auto-generation strategy ("expression" is the only
    one the platform ships); `from_` holds the pattern it draws from.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Parameter name referenced as ${NAME}")
    display_name: str = Field("", alias="displayName")
    description: str = ""
    value: str = ""
    generate: str = ""
    from_: str = Field("", alias="from")
    required: bool = False

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("parameter name cannot be empty")
        return v


class ObjectMeta(BaseModel):
    """Subset of object metadata the pipeline reads."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    namespace: str = ""
    generate_name: str = Field("", alias="generateName")
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class Template(BaseModel):
    """
    A parameterized resource bundle as stored in the cluster.

    Parameter order is preserved; names are unique.
    """
    model_config = ConfigDict(populate_by_name=True)

    kind: str = "Template"
    api_version: str = Field("v1", alias="apiVersion")
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    parameters: list[TemplateParameter] = Field(default_factory=list)
    objects: list[dict[str, Any]] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)

    @field_validator("parameters")
    @classmethod
    def parameter_names_unique(cls, v: list[TemplateParameter]) -> list[TemplateParameter]:
        seen: set[str] = set()
        for param in v:
            if param.name in seen:
                raise ValueError(f"duplicate parameter '{param.name}'")
            seen.add(param.name)
        return v

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def get_parameter(self, name: str) -> TemplateParameter | None:
        """Get a declared parameter by name."""
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def set_parameter(self, parameter: TemplateParameter) -> None:
        """Replace the parameter with the same name, or append it."""
        for index, existing in enumerate(self.parameters):
            if existing.name == parameter.name:
                self.parameters[index] = parameter
                return
        self.parameters.append(parameter)

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize using wire field names."""
        return self.model_dump(by_alias=True, exclude_defaults=False)
