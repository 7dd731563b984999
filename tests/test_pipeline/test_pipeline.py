"""Tests for PipelineTemplate runs, end to end against an in-memory cluster."""

import json
import logging
import threading
from io import StringIO

import pytest

from pipetemplate.clients import (
    InMemoryCluster,
    InMemoryTemplateStore,
    RawObject,
    RecordingResourceCreator,
    create_in_memory_cluster,
)
from pipetemplate.config import InstantiatorOptions, PipelineConfig
from pipetemplate.errors import (
    EmptyParameterNameError,
    InstantiationCancelledError,
    InstantiationError,
    MappingError,
    ProcessingError,
    RequiredServiceMissingError,
    ResourceCreateError,
    TemplateNotFoundError,
    TransportError,
    UnknownParameterError,
)
from pipetemplate.observability import configure_logging, get_metrics
from pipetemplate.pipeline import PipelineTemplate, create_pipeline_template
from pipetemplate.vocabulary import ErrorCategory, RunState


@pytest.fixture
def json_log():
    stream = StringIO()
    configure_logging(json_format=True, stream=stream)
    yield stream
    logging.getLogger("pipetemplate").handlers.clear()


class TestProcess:
    """Tests for PipelineTemplate.process."""

    def test_process_maps_resources(self, cluster, pipeline_config):
        run = create_pipeline_template(pipeline_config, "ci", cluster, {"IMAGE_TAG": "v2"})

        assert run.process() is run
        assert run.state == RunState.PROCESSED_OK
        assert run.errors() == []
        assert [(i.kind, i.is_origin) for i in run.items] == [
            ("Service", False),
            ("DeploymentConfig", True),
            ("BuildConfig", True),
        ]

    def test_explicit_value_reaches_expansion(self, cluster, pipeline_config):
        """The supplied value wins over the template's generator."""
        run = create_pipeline_template(pipeline_config, "ci", cluster, {"IMAGE_TAG": "v2"})
        run.process()

        _, submitted = cluster.processor.calls[0]
        param = submitted.get_parameter("IMAGE_TAG")
        assert param.value == "v2"
        assert param.generate == ""

        deployment = json.loads(run.items[1].raw_json)
        image = deployment["spec"]["template"]["spec"]["containers"][0]["image"]
        assert image == "jenkins:v2"

    def test_expanded_in_target_namespace(self, cluster, pipeline_config):
        create_pipeline_template(pipeline_config, "ci", cluster).process()
        assert cluster.processor.calls[0][0] == "ci"

    def test_process_idempotent(self, cluster, pipeline_config):
        """A second call changes nothing."""
        run = create_pipeline_template(pipeline_config, "ci", cluster, {"IMAGE_TAG": "v2"})
        run.process()
        items, errors = list(run.items), run.errors()

        run.process()

        assert run.items == items
        assert run.errors() == errors
        assert len(cluster.processor.calls) == 1

    def test_failed_process_idempotent(self, pipeline_config):
        run = create_pipeline_template(pipeline_config, "ci", create_in_memory_cluster())
        run.process()
        run.process()
        assert len(run.errors()) == 1

    def test_template_not_found(self, pipeline_config):
        run = create_pipeline_template(pipeline_config, "ci", create_in_memory_cluster())
        run.process()

        assert run.state == RunState.PROCESSED_FAILED
        [error] = run.errors()
        assert isinstance(error, TemplateNotFoundError)
        assert "openshift/jenkins-pipeline" in str(error)
        assert error.category == ErrorCategory.CONFIGURATION

    def test_store_transport_error(self, cluster, pipeline_config):
        class DownStore:
            def get(self, namespace, name):
                raise TransportError("503 Service Unavailable")

        run = PipelineTemplate(
            pipeline_config, "ci", DownStore(), cluster.processor,
            cluster.base_creator, cluster.origin_creator,
        )
        run.process()

        [error] = run.errors()
        assert error.category == ErrorCategory.TRANSPORT
        assert "503" in str(error)

    def test_bad_parameters_recorded(self, cluster, pipeline_config):
        run = create_pipeline_template(
            pipeline_config, "ci", cluster, {"": "x", "NOPE": "y", "IMAGE_TAG": "v2"}
        )
        run.process()

        assert run.state == RunState.PROCESSED_FAILED
        assert [type(e) for e in run.errors()] == [EmptyParameterNameError, UnknownParameterError]

    def test_processing_failure(self, cluster, pipeline_config):
        class FailingProcessor:
            def process(self, namespace, template):
                raise TransportError("admission denied")

        run = PipelineTemplate(
            pipeline_config, "ci", cluster.store, FailingProcessor(),
            cluster.base_creator, cluster.origin_creator,
        )
        run.process()

        [error] = run.errors()
        assert isinstance(error, ProcessingError)
        assert run.items == []

    def test_mapping_errors_recorded(self, cluster, pipeline_config):
        class MixedProcessor:
            def process(self, namespace, template):
                return [
                    RawObject(b'{"apiVersion": "v1", "kind": "Service", "metadata": {"name": "jenkins"}}'),
                    {"kind": "Service"},
                ]

        run = PipelineTemplate(
            pipeline_config, "ci", cluster.store, MixedProcessor(),
            cluster.base_creator, cluster.origin_creator,
        )
        run.process()

        assert run.state == RunState.PROCESSED_FAILED
        assert isinstance(run.errors()[0], MappingError)
        assert not run.has_required_service()

    def test_metrics(self, cluster, pipeline_config):
        create_pipeline_template(pipeline_config, "ci", cluster).process()
        create_pipeline_template(pipeline_config, "ci", create_in_memory_cluster()).process()

        metrics = get_metrics()
        assert metrics.templates_processed.value == 1
        assert metrics.process_failures.value == 1
        assert metrics.process_duration_seconds.count == 2

    def test_empty_target_namespace(self, cluster, pipeline_config):
        with pytest.raises(ValueError):
            create_pipeline_template(pipeline_config, "", cluster)


class TestInstantiate:
    """Tests for PipelineTemplate.instantiate."""

    def test_end_to_end(self, cluster, pipeline_config):
        """Three resources, one parameter, everything created."""
        run = create_pipeline_template(pipeline_config, "ci", cluster, {"IMAGE_TAG": "v2"})

        result = run.process().instantiate()

        assert result.success
        assert result.total == 3
        assert run.state == RunState.INSTANTIATED_OK
        assert run.errors() == []
        assert [c.resource for c in cluster.base_creator.calls] == ["services"]
        assert [c.resource for c in cluster.origin_creator.calls] == [
            "deploymentconfigs",
            "buildconfigs",
        ]
        assert [c.body for c in cluster.create_calls] == [
            run.items[0].raw_json,
            run.items[1].raw_json,
            run.items[2].raw_json,
        ]

    def test_partial_failure(self, cluster, pipeline_config):
        """One failed creation: summary error, one create error, no rollback."""
        cluster.origin_creator.fail_on["deploymentconfigs"] = RuntimeError("quota exceeded")
        run = create_pipeline_template(pipeline_config, "ci", cluster, {"IMAGE_TAG": "v2"})
        run.process()

        with pytest.raises(InstantiationError) as exc_info:
            run.instantiate()

        assert "1 of 3 pipeline components failed to create" in str(exc_info.value)
        assert len(run.process_outcome) == 0
        [error] = run.create_outcome
        assert isinstance(error, ResourceCreateError)
        assert error.kind == "DeploymentConfig"
        assert run.errors() == [error]

        created = exc_info.value.result.created
        assert [m.kind for m in created] == ["Service", "BuildConfig"]
        assert [c.resource for c in cluster.base_creator.created] == ["services"]
        assert [c.resource for c in cluster.origin_creator.created] == ["buildconfigs"]
        assert run.state == RunState.INSTANTIATED_PARTIAL

    def test_missing_required_service(self, cluster, jenkins_template):
        """Wrong service name: configuration error and zero creation calls."""
        config = PipelineConfig(
            namespace="openshift",
            template_name="jenkins-pipeline",
            service_name="jenkins-ui",
        )
        run = create_pipeline_template(config, "ci", cluster)
        run.process()

        with pytest.raises(RequiredServiceMissingError) as exc_info:
            run.instantiate()

        assert exc_info.value.category == ErrorCategory.CONFIGURATION
        assert "openshift/jenkins-pipeline" in str(exc_info.value)
        assert "'jenkins-ui'" in str(exc_info.value)
        assert cluster.create_calls == []
        assert run.create_outcome.errors == [exc_info.value]
        assert run.state == RunState.INSTANTIATED_FAILED

    def test_process_errors_block_instantiation(self, cluster, pipeline_config):
        """No creation call is made once processing failed."""
        run = create_pipeline_template(pipeline_config, "ci", cluster, {"NOPE": "1"})
        run.process()

        with pytest.raises(InstantiationError, match="processing pipeline template failed"):
            run.instantiate()

        assert cluster.create_calls == []
        assert len(run.create_outcome) == 0

    def test_requires_process(self, cluster, pipeline_config):
        run = create_pipeline_template(pipeline_config, "ci", cluster)
        with pytest.raises(InstantiationError, match="processed"):
            run.instantiate()
        assert cluster.create_calls == []

    def test_single_use(self, cluster, pipeline_config):
        run = create_pipeline_template(pipeline_config, "ci", cluster)
        run.process().instantiate()

        with pytest.raises(InstantiationError, match="already instantiated"):
            run.instantiate()
        assert len(cluster.create_calls) == 3

    def test_cancelled(self, pipeline_config, jenkins_template):
        cancel = threading.Event()
        cluster = InMemoryCluster(
            store=InMemoryTemplateStore([jenkins_template]),
            base_creator=RecordingResourceCreator(on_create=lambda call: cancel.set()),
        )
        run = create_pipeline_template(pipeline_config, "ci", cluster)
        run.process()

        with pytest.raises(InstantiationCancelledError) as exc_info:
            run.instantiate(cancel=cancel)

        assert exc_info.value.category == ErrorCategory.CANCELLED
        assert [m.kind for m in exc_info.value.result.created] == ["Service"]
        assert run.create_outcome.by_category(ErrorCategory.CANCELLED)
        assert run.state == RunState.INSTANTIATED_PARTIAL

    def test_parallel_creation(self, cluster, pipeline_config):
        cluster.base_creator.fail_on["services"] = RuntimeError("exists")
        run = create_pipeline_template(
            pipeline_config, "ci", cluster, options=InstantiatorOptions(max_workers=4)
        )
        run.process()

        with pytest.raises(InstantiationError, match="1 of 3"):
            run.instantiate()
        assert len(run.create_outcome) == 1

    def test_instantiation_metrics(self, cluster, pipeline_config):
        create_pipeline_template(pipeline_config, "ci", cluster).process().instantiate()

        metrics = get_metrics()
        assert metrics.instantiations_total.value == 1
        assert metrics.instantiations_failed.value == 0
        assert metrics.active_instantiations.value == 0
        assert metrics.resources_created.value == 3

    def test_parallel_creation_logs_carry_run_id(self, cluster, pipeline_config, json_log):
        """Worker threads log under the run's ID."""
        cluster.origin_creator.fail_on["buildconfigs"] = RuntimeError("quota exceeded")
        run = create_pipeline_template(
            pipeline_config, "ci", cluster, options=InstantiatorOptions(max_workers=4)
        )
        run.process()

        with pytest.raises(InstantiationError):
            run.instantiate()

        entries = [json.loads(line) for line in json_log.getvalue().splitlines()]
        created = [e for e in entries if e["message"].startswith("Created ")]
        failed = [e for e in entries if e["message"].startswith("creating component")]
        assert len(created) == 2
        assert len(failed) == 1
        assert all(e["run_id"] == str(run.run_id) for e in created + failed)
