"""
Clients — Collaborators the pipeline talks to.

Provides the protocols plus real (REST) and in-memory implementations.
"""

from pipetemplate.clients.base import (
    RawObject,
    TemplateStore,
    TemplateProcessor,
    ResourceCreator,
)
from pipetemplate.clients.memory import (
    InMemoryTemplateStore,
    LocalTemplateProcessor,
    CreateCall,
    RecordingResourceCreator,
    InMemoryCluster,
    create_in_memory_cluster,
)
from pipetemplate.clients.rest import (
    BASE_API_PREFIX,
    ORIGIN_API_PREFIX,
    RestClusterClient,
    RestResourceCreator,
    create_rest_client,
)

__all__ = [
    # Protocols
    "RawObject",
    "TemplateStore",
    "TemplateProcessor",
    "ResourceCreator",
    # In-memory
    "InMemoryTemplateStore",
    "LocalTemplateProcessor",
    "CreateCall",
    "RecordingResourceCreator",
    "InMemoryCluster",
    "create_in_memory_cluster",
    # REST
    "BASE_API_PREFIX",
    "ORIGIN_API_PREFIX",
    "RestClusterClient",
    "RestResourceCreator",
    "create_rest_client",
]
