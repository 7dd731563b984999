"""
Instantiator — Create mapped resources in the target namespace.

Creation is not fail-fast: each item's failure is recorded and the loop
moves on. A cancel event or deadline stops the loop between items, never
during a call.
"""

import contextvars
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

from pipetemplate.clients import ResourceCreator
from pipetemplate.config import InstantiatorOptions
from pipetemplate.errors import CreationCancelledError, PipelineError, ResourceCreateError
from pipetemplate.observability import get_logger, get_metrics
from pipetemplate.pipeline.mapper import ResourceMapping
from pipetemplate.vocabulary import ResourceGroup


logger = get_logger("pipeline.instantiator")

SERVICE_KIND = "Service"


def has_required_service(items: list[ResourceMapping], service_name: str) -> bool:
    """True if a Service named `service_name` is among `items`."""
    return any(
        item.name == service_name and item.kind == SERVICE_KIND
        for item in items
    )


@dataclass
class InstantiationResult:
    """What one creation pass did."""
    total: int
    created: list[ResourceMapping] = field(default_factory=list)
    failed: list[ResourceMapping] = field(default_factory=list)
    skipped: list[ResourceMapping] = field(default_factory=list)
    errors: list[PipelineError] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def cancelled(self) -> bool:
        return bool(self.skipped)

    @property
    def success(self) -> bool:
        return not self.failed and not self.skipped


@dataclass
class _ItemOutcome:
    item: ResourceMapping
    error: ResourceCreateError | None = None
    attempted: bool = True


class Instantiator:
    """
    Routes each mapping to the creator for its API group.

    Usage:
        instantiator = Instantiator(base_creator, origin_creator)
        result = instantiator.create_all("ci", mappings)
    """

    def __init__(
        self,
        base_creator: ResourceCreator,
        origin_creator: ResourceCreator,
        options: InstantiatorOptions | None = None,
    ):
        self.creators: dict[ResourceGroup, ResourceCreator] = {
            ResourceGroup.BASE: base_creator,
            ResourceGroup.ORIGIN: origin_creator,
        }
        self.options = options or InstantiatorOptions()

    def create_all(
        self,
        namespace: str,
        items: list[ResourceMapping],
        cancel: threading.Event | None = None,
    ) -> InstantiationResult:
        """
        Create every item, in expansion order when sequential.

        Returns the per-item accounting; never raises for creation failures.
        """
        start = time.monotonic()
        should_stop = self._stop_condition(start, cancel)

        if self.options.max_workers > 1 and len(items) > 1:
            outcomes = self._create_parallel(namespace, items, should_stop)
        else:
            outcomes = self._create_sequential(namespace, items, should_stop)

        result = InstantiationResult(total=len(items))
        for outcome in outcomes:
            if not outcome.attempted:
                result.skipped.append(outcome.item)
            elif outcome.error is not None:
                result.failed.append(outcome.item)
                result.errors.append(outcome.error)
            else:
                result.created.append(outcome.item)

        if result.skipped:
            reason = "cancelled" if cancel is not None and cancel.is_set() else "timed out"
            logger.warning(
                "Instantiation %s, %d components not attempted", reason, len(result.skipped)
            )
            result.errors.append(CreationCancelledError(len(result.skipped), reason))

        result.duration_seconds = time.monotonic() - start
        return result

    def _stop_condition(
        self, start: float, cancel: threading.Event | None
    ) -> Callable[[], bool]:
        deadline = None
        if self.options.timeout_seconds is not None:
            deadline = start + self.options.timeout_seconds

        def should_stop() -> bool:
            if cancel is not None and cancel.is_set():
                return True
            return deadline is not None and time.monotonic() >= deadline

        return should_stop

    def _create_sequential(
        self,
        namespace: str,
        items: list[ResourceMapping],
        should_stop: Callable[[], bool],
    ) -> list[_ItemOutcome]:
        outcomes: list[_ItemOutcome] = []
        for item in items:
            if should_stop():
                outcomes.append(_ItemOutcome(item, attempted=False))
                continue
            outcomes.append(self._create_one(namespace, item))
        return outcomes

    def _create_parallel(
        self,
        namespace: str,
        items: list[ResourceMapping],
        should_stop: Callable[[], bool],
    ) -> list[_ItemOutcome]:
        def task(item: ResourceMapping) -> _ItemOutcome:
            if should_stop():
                return _ItemOutcome(item, attempted=False)
            return self._create_one(namespace, item)

        # Each task runs in its own copy of the caller's context.
        with ThreadPoolExecutor(max_workers=self.options.max_workers) as executor:
            futures = [
                executor.submit(contextvars.copy_context().run, task, item)
                for item in items
            ]
            return [future.result() for future in futures]

    def _create_one(self, namespace: str, item: ResourceMapping) -> _ItemOutcome:
        metrics = get_metrics()
        creator = self.creators[item.group]
        started = time.monotonic()
        try:
            creator.create(namespace, item.resource, item.raw_json)
        except Exception as e:
            metrics.resource_create_failures.inc()
            error = ResourceCreateError(item.kind, item.name, e)
            logger.error("%s", error)
            return _ItemOutcome(item, error)
        finally:
            metrics.create_latency_seconds.observe(time.monotonic() - started)

        metrics.resources_created.inc()
        logger.info("Created %s/%s in %s", item.kind, item.name, namespace)
        return _ItemOutcome(item)


def create_instantiator(
    base_creator: ResourceCreator,
    origin_creator: ResourceCreator,
    max_workers: int = 1,
    timeout_seconds: float | None = None,
) -> Instantiator:
    """Factory for an instantiator."""
    return Instantiator(
        base_creator,
        origin_creator,
        InstantiatorOptions(max_workers=max_workers, timeout_seconds=timeout_seconds),
    )
