"""
Shared fixtures: a Jenkins pipeline template and an in-memory cluster.
"""

import json

import pytest

from pipetemplate.clients import RawObject, create_in_memory_cluster
from pipetemplate.config import PipelineConfig
from pipetemplate.observability import reset_metrics
from pipetemplate.templates import Template, TemplateParameter, ObjectMeta


JENKINS_SERVICE = {
    "apiVersion": "v1",
    "kind": "Service",
    "metadata": {"name": "jenkins"},
    "spec": {"ports": [{"name": "web", "port": 80, "targetPort": 8080}]},
}

JENKINS_DEPLOYMENT = {
    "apiVersion": "v1",
    "kind": "DeploymentConfig",
    "metadata": {"name": "jenkins"},
    "spec": {
        "replicas": 1,
        "template": {
            "spec": {"containers": [{"name": "jenkins", "image": "jenkins:${IMAGE_TAG}"}]}
        },
    },
}

PIPELINE_BUILD = {
    "apiVersion": "v1",
    "kind": "BuildConfig",
    "metadata": {"name": "sample-pipeline"},
    "spec": {"strategy": {"type": "JenkinsPipeline"}},
}


def raw(obj: dict) -> RawObject:
    return RawObject(json.dumps(obj).encode("utf-8"))


@pytest.fixture(autouse=True)
def clean_metrics():
    """Each test starts with zeroed metrics."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def jenkins_template() -> Template:
    return Template(
        metadata=ObjectMeta(name="jenkins-pipeline", namespace="openshift"),
        parameters=[
            TemplateParameter(
                name="IMAGE_TAG",
                generate="expression",
                from_="[a-z0-9]{6}",
            ),
        ],
        objects=[JENKINS_SERVICE, JENKINS_DEPLOYMENT, PIPELINE_BUILD],
    )


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        namespace="openshift",
        template_name="jenkins-pipeline",
        service_name="jenkins",
    )


@pytest.fixture
def cluster(jenkins_template):
    return create_in_memory_cluster([jenkins_template])
