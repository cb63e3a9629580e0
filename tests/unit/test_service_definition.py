"""
Unit tests for service definitions and their accessors.
"""
import pytest

from composedoc.errors import FormatError
from composedoc.MODELS.service_definition import HealthCheck, ServiceDefinition


def test_image_accessors():
    svc = ServiceDefinition(image="nginx:1.25")
    assert svc.get_image_name() == "nginx"
    assert svc.get_version() == "1.25"

    svc.set_version("2.0")
    assert svc.image == "nginx:2.0"


def test_image_accessors_default_tag():
    svc = ServiceDefinition(image="nginx")
    assert svc.get_image_name() == "nginx"
    assert svc.get_version() == "latest"

    svc.set_version("latest")
    assert svc.image == "nginx:latest"


def test_empty_image_degrades():
    svc = ServiceDefinition(image="")
    assert svc.get_image_name() == ""
    assert svc.get_version() == "latest"


def test_git_registry():
    assert ServiceDefinition(image="app").get_git_registry() == ""
    assert ServiceDefinition(image="app", labels={"team": "core"}).get_git_registry() == ""

    svc = ServiceDefinition(image="app", labels={"git.repository": "git@example.com:app.git"})
    assert svc.get_git_registry() == "git@example.com:app.git"


def test_validation_normalizes_shapes():
    svc = ServiceDefinition.model_validate({
        "image": "app",
        "environment": ["A=1"],
        "depends_on": ["db"],
        "ports": [8080],
        "healthcheck": {"test": "curl -f localhost", "retries": 3, "timeout": 10},
    })
    assert svc.environment == {"A": "1"}
    assert svc.depends_on == {"db": ""}
    assert svc.ports == ["8080"]
    assert svc.healthcheck.test == ["CMD-SHELL", "curl -f localhost"]
    assert svc.healthcheck.timeout == "10"
    assert svc.healthcheck.retries == 3


def test_codec_errors_are_not_wrapped():
    with pytest.raises(FormatError):
        ServiceDefinition.model_validate({"image": "app", "environment": ["BROKEN"]})


def test_name_is_not_serialized():
    svc = ServiceDefinition(image="app")
    assert svc.name is None
    svc.bind_name("web")
    assert svc.name == "web"
    assert "name" not in svc.model_dump()


def test_dump_omits_empty_fields():
    svc = ServiceDefinition(image="app", privileged=False, ports=[], hostname="")
    assert svc.model_dump() == {"image": "app"}


def test_dump_canonical_shapes():
    svc = ServiceDefinition(
        image="app",
        environment={"B": "2", "A": "1"},
        depends_on={"db": "service_healthy", "cache": ""},
        privileged=True,
    )
    data = svc.model_dump()
    assert list(data["environment"]) == ["A", "B"]
    assert data["depends_on"] == {"cache": None, "db": {"condition": "service_healthy"}}
    assert data["privileged"] is True


def test_healthcheck_keeps_zero_retries():
    assert HealthCheck(test=["CMD", "true"], retries=0).model_dump() == {"test": ["CMD", "true"], "retries": 0}


def test_healthcheck_rejects_negative_retries():
    with pytest.raises(ValueError):
        HealthCheck(retries=-1)


def test_unknown_fields_survive():
    svc = ServiceDefinition.model_validate({"image": "app", "command": ["serve", "--port", "80"], "x-team": "core"})
    data = svc.model_dump()
    assert data["command"] == ["serve", "--port", "80"]
    assert data["x-team"] == "core"
