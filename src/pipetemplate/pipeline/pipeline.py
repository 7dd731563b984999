"""
Pipeline Template — One instantiation run of a parameterized template.

Combines fetching, parameter substitution, expansion, mapping and
creation behind two calls:

    run = create_pipeline_template(config, "ci", cluster, {"IMAGE_TAG": "v2"})
    run.process()
    run.instantiate()

A run is single-use. process() is idempotent; instantiate() may be
called once, and only after process() succeeded.
"""

import threading
import time
from typing import Mapping
from uuid import uuid4

from pipetemplate.clients import (
    InMemoryCluster,
    ResourceCreator,
    TemplateProcessor,
    TemplateStore,
)
from pipetemplate.config import InstantiatorOptions, PipelineConfig
from pipetemplate.errors import (
    InstantiationCancelledError,
    InstantiationError,
    PipelineError,
    RequiredServiceMissingError,
)
from pipetemplate.observability import RunContext, get_logger, get_metrics
from pipetemplate.pipeline.fetcher import fetch_template
from pipetemplate.pipeline.instantiator import (
    InstantiationResult,
    Instantiator,
    has_required_service,
)
from pipetemplate.pipeline.mapper import ResourceMapper, ResourceMapping, expand_template
from pipetemplate.pipeline.outcome import Outcome
from pipetemplate.templates import substitute_parameters
from pipetemplate.vocabulary import RunState


logger = get_logger("pipeline")


class PipelineTemplate:
    """
    Instantiates the configured template into `target_namespace`.

    Errors are collected rather than raised: process errors during
    process(), create errors during instantiate(). errors() returns both,
    process errors first.
    """

    def __init__(
        self,
        config: PipelineConfig,
        target_namespace: str,
        store: TemplateStore,
        processor: TemplateProcessor,
        base_creator: ResourceCreator,
        origin_creator: ResourceCreator,
        parameters: Mapping[str, str] | None = None,
        mapper: ResourceMapper | None = None,
        options: InstantiatorOptions | None = None,
    ):
        if not target_namespace:
            raise ValueError("target_namespace cannot be empty")

        self.config = config
        self.target_namespace = target_namespace
        self.parameters = dict(parameters or {})
        self.run_id = uuid4()

        self._store = store
        self._processor = processor
        self._mapper = mapper or ResourceMapper()
        self._instantiator = Instantiator(base_creator, origin_creator, options)

        self.items: list[ResourceMapping] = []
        self.process_outcome = Outcome("process")
        self.create_outcome = Outcome("create")
        self.result: InstantiationResult | None = None
        self._state = RunState.UNPROCESSED

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def template_ref(self) -> str:
        return f"{self.config.namespace}/{self.config.template_name}"

    def errors(self) -> list[PipelineError]:
        """Process errors followed by create errors."""
        return list(self.process_outcome) + list(self.create_outcome)

    def has_required_service(self) -> bool:
        """True if processing succeeded and produced the configured Service."""
        if self.errors():
            return False
        return has_required_service(self.items, self.config.service_name)

    # =========================================================================
    # PROCESS
    # =========================================================================

    def process(self) -> "PipelineTemplate":
        """
        Fetch, substitute, expand and map the template.

        Safe to call more than once; only the first call does any work.
        """
        if self._state != RunState.UNPROCESSED:
            return self

        metrics = get_metrics()
        start = time.monotonic()
        with RunContext(self.run_id):
            self._process()
            metrics.process_duration_seconds.observe(time.monotonic() - start)

            if self.process_outcome.ok:
                self._state = RunState.PROCESSED_OK
                metrics.templates_processed.inc()
                logger.info(
                    "Processed pipeline template %s into %d resources",
                    self.template_ref,
                    len(self.items),
                )
            else:
                self._state = RunState.PROCESSED_FAILED
                metrics.process_failures.inc()
                logger.warning(
                    "Processing pipeline template %s failed with %d errors",
                    self.template_ref,
                    len(self.process_outcome),
                )
        return self

    def _process(self) -> None:
        try:
            template = fetch_template(self._store, self.config)
        except PipelineError as e:
            self.process_outcome.add(e)
            return
        logger.debug("Fetched template %s", self.template_ref)

        template, substitution_errors = substitute_parameters(template, self.parameters)
        self.process_outcome.extend(substitution_errors)
        logger.debug(
            "Substituted %d parameters (%d rejected)",
            len(self.parameters),
            len(substitution_errors),
        )

        self.items, mapping_errors = expand_template(
            self._processor,
            self.target_namespace,
            template,
            self._mapper,
            source=(self.config.namespace, self.config.template_name),
        )
        self.process_outcome.extend(mapping_errors)

    # =========================================================================
    # INSTANTIATE
    # =========================================================================

    def instantiate(self, cancel: threading.Event | None = None) -> InstantiationResult:
        """
        Create every mapped resource in the target namespace.

        Raises InstantiationError without creating anything if the run has
        errors already, RequiredServiceMissingError if the configured
        Service is absent, and InstantiationError summarizing the failures
        if any creation call failed. Resources created before a failure
        are left in place.
        """
        if self._state == RunState.UNPROCESSED:
            raise InstantiationError("pipeline template must be processed before instantiation")
        if self._state.is_terminal:
            raise InstantiationError(
                f"pipeline template {self.template_ref} was already instantiated"
            )
        if self.errors():
            raise InstantiationError("unable to instantiate, processing pipeline template failed")

        metrics = get_metrics()
        metrics.instantiations_total.inc()

        with RunContext(self.run_id):
            if not self.has_required_service():
                error = RequiredServiceMissingError(
                    self.config.namespace,
                    self.config.template_name,
                    self.config.service_name,
                )
                self.create_outcome.add(error)
                self._state = RunState.INSTANTIATED_FAILED
                metrics.instantiations_failed.inc()
                logger.error("%s", error)
                raise error

            metrics.active_instantiations.inc()
            try:
                result = self._instantiator.create_all(self.target_namespace, self.items, cancel)
            finally:
                metrics.active_instantiations.dec()

            self.result = result
            self.create_outcome.extend(result.errors)

            if result.success:
                self._state = RunState.INSTANTIATED_OK
                logger.info(
                    "Instantiated %d pipeline components in %s",
                    result.total,
                    self.target_namespace,
                )
                return result

            # TODO: decide whether partial creation should delete what was created
            self._state = RunState.INSTANTIATED_PARTIAL
            metrics.instantiations_failed.inc()
            if result.cancelled:
                raise InstantiationCancelledError(
                    f"instantiation stopped after {len(result.created) + result.failed_count} "
                    f"of {result.total} pipeline components",
                    result,
                )
            raise InstantiationError(
                f"{result.failed_count} of {result.total} pipeline components failed to create",
                result,
            )


def create_pipeline_template(
    config: PipelineConfig,
    target_namespace: str,
    cluster: InMemoryCluster,
    parameters: Mapping[str, str] | None = None,
    **kwargs,
) -> PipelineTemplate:
    """Factory wiring a run to an in-memory cluster bundle."""
    return PipelineTemplate(
        config=config,
        target_namespace=target_namespace,
        store=cluster.store,
        processor=cluster.processor,
        base_creator=cluster.base_creator,
        origin_creator=cluster.origin_creator,
        parameters=parameters,
        **kwargs,
    )
