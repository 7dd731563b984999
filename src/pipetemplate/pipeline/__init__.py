"""
Pipeline — Template instantiation from fetch to creation.

Usage:
    from pipetemplate.config import PipelineConfig
    from pipetemplate.clients import create_in_memory_cluster
    from pipetemplate.pipeline import create_pipeline_template

    run = create_pipeline_template(config, "ci", cluster, {"IMAGE_TAG": "v2"})
    result = run.process().instantiate()
"""

from pipetemplate.pipeline.outcome import Outcome
from pipetemplate.pipeline.fetcher import fetch_template
from pipetemplate.pipeline.mapper import (
    ResourceMapping,
    ResourceMapper,
    expand_template,
)
from pipetemplate.pipeline.instantiator import (
    SERVICE_KIND,
    InstantiationResult,
    Instantiator,
    has_required_service,
    create_instantiator,
)
from pipetemplate.pipeline.pipeline import (
    PipelineTemplate,
    create_pipeline_template,
)

__all__ = [
    # Outcome
    "Outcome",
    # Stages
    "fetch_template",
    "ResourceMapping",
    "ResourceMapper",
    "expand_template",
    # Instantiation
    "SERVICE_KIND",
    "InstantiationResult",
    "Instantiator",
    "has_required_service",
    "create_instantiator",
    # Runs
    "PipelineTemplate",
    "create_pipeline_template",
]
