"""
Template Fetcher — Load the pipeline template from its source namespace.
"""

from pipetemplate.config import PipelineConfig
from pipetemplate.clients import TemplateStore
from pipetemplate.errors import NotFoundError, TemplateNotFoundError, TransportError
from pipetemplate.templates import Template


def fetch_template(store: TemplateStore, config: PipelineConfig) -> Template:
    """
    Fetch the configured template.

    Raises TemplateNotFoundError when the store reports the template
    missing, and TransportError (wrapping the cause) for anything else.
    """
    try:
        return store.get(config.namespace, config.template_name)
    except NotFoundError as e:
        raise TemplateNotFoundError(config.namespace, config.template_name) from e
    except TransportError:
        raise
    except Exception as e:
        raise TransportError(
            f"fetching template {config.namespace}/{config.template_name} failed: {e}", e
        ) from e
