"""
Configuration — Pipeline coordinates and cluster connection settings.
"""

import os
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator


ENV_PREFIX = "PIPETEMPLATE_"


class PipelineConfig(BaseModel):
    """
    Identifies which template to fetch and which service must exist
    once the template has been expanded.
    """
    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="Namespace holding the template")
    template_name: str = Field(..., description="Name of the template to instantiate")
    service_name: str = Field(..., description="Service that must be present after expansion")

    @field_validator("namespace", "template_name", "service_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be empty")
        return v


@dataclass
class ClusterConfig:
    """Connection settings for the REST cluster client."""
    server: str | None = None  # Falls back to PIPETEMPLATE_SERVER env var
    token: str | None = None   # Falls back to PIPETEMPLATE_TOKEN env var
    verify_tls: bool = True
    timeout: float = 30.0

    @classmethod
    def from_env(cls, **overrides) -> "ClusterConfig":
        """Build config from PIPETEMPLATE_* environment variables."""
        verify = os.environ.get(f"{ENV_PREFIX}VERIFY_TLS", "true").lower()
        values = {
            "server": os.environ.get(f"{ENV_PREFIX}SERVER"),
            "token": os.environ.get(f"{ENV_PREFIX}TOKEN"),
            "verify_tls": verify not in ("0", "false", "no"),
            "timeout": float(os.environ.get(f"{ENV_PREFIX}TIMEOUT", "30")),
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class InstantiatorOptions:
    """Tuning for the creation loop."""
    max_workers: int = 1                 # 1 = sequential, in expansion order
    timeout_seconds: float | None = None  # Deadline checked between items

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
