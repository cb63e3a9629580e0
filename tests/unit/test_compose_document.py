"""
Unit tests for the compose document model.
"""
import pytest
import yaml

from composedoc.errors import FormatError, UnsupportedFormatError
from composedoc.MODELS.compose_document import ComposeDocument, NetworkConfig
from composedoc.MODELS.service_definition import HealthCheck, ServiceDefinition


def _document(**services):
    return ComposeDocument(version="3.8", services=services)


def test_get_service():
    doc = _document(web=ServiceDefinition(image="nginx"))
    assert doc.get_service("web").image == "nginx"
    assert doc.get_service("web").name == "web"
    assert doc.get_service("missing") is None


def test_set_service_inserts_and_replaces():
    doc = _document(web=ServiceDefinition(image="nginx:1.0"))
    doc.set_service("web", ServiceDefinition(image="nginx:2.0"))
    doc.set_service("db", ServiceDefinition(image="postgres"))

    assert doc.get_service("web").image == "nginx:2.0"
    assert doc.get_service("db").name == "db"
    assert len(doc.services) == 2


def test_services_serialize_sorted():
    doc = _document()
    for name in ("c", "a", "b"):
        doc.set_service(name, ServiceDefinition(image=name))

    assert list(doc.to_data()["services"]) == ["a", "b", "c"]
    assert list(yaml.safe_load(doc.to_yaml())["services"]) == ["a", "b", "c"]


def test_from_data_attaches_names():
    doc = ComposeDocument.from_data({"version": "3", "services": {"web": {"image": "nginx"}}})
    assert doc.services["web"].name == "web"


def test_from_data_rejects_non_mapping():
    with pytest.raises(FormatError):
        ComposeDocument.from_data(["services"])
    with pytest.raises(FormatError):
        ComposeDocument.from_data(None)


def test_from_data_requires_version_and_services():
    with pytest.raises(FormatError):
        ComposeDocument.from_data({"services": {"web": {"image": "nginx"}}})
    with pytest.raises(FormatError):
        ComposeDocument.from_data({"version": "3"})


def test_from_data_requires_image():
    with pytest.raises(FormatError):
        ComposeDocument.from_data({"version": "3", "services": {"web": {"hostname": "web"}}})


def test_numeric_version_is_read_as_string():
    doc = ComposeDocument.from_data({"version": 3.8, "services": {}})
    assert doc.version == "3.8"


def test_resources_are_carried():
    doc = ComposeDocument.from_data({
        "version": "3",
        "services": {},
        "networks": {"front": {"driver": "bridge", "driver_opts": {"mtu": 1400}}, "outside": {"external": True}},
        "volumes": {"data": None, "logs": {"driver": "local"}},
        "secrets": {"token": {"file": "./token.txt"}},
    })
    assert doc.networks["front"].driver == "bridge"
    assert doc.networks["outside"].external is True
    assert doc.volumes == {"data": {}, "logs": {"driver": "local"}}

    data = doc.to_data()
    assert data["networks"] == {
        "front": {"driver": "bridge", "driver_opts": {"mtu": 1400}},
        "outside": {"external": True},
    }
    assert data["volumes"] == {"data": {}, "logs": {"driver": "local"}}
    assert data["secrets"] == {"token": {"file": "./token.txt"}}


def test_round_trip_yaml_and_json():
    doc = _document(
        web=ServiceDefinition(
            image="registry.example.com:5000/web:1.0",
            container_name="web",
            restart="always",
            environment={"DEBUG": "true", "PORT": "80"},
            logging={"driver": "json-file", "options": {"max-size": "10m"}},
            networks=["front"],
            ports=["80:80"],
            volumes=["./html:/usr/share/nginx/html:ro"],
            labels={"git.repository": "https://example.com/web.git"},
            depends_on={"db": ""},
            healthcheck=HealthCheck(test=["CMD", "curl", "-f", "http://localhost"], interval="30s", retries=3),
            security_opt=["no-new-privileges:true"],
        ),
        db=ServiceDefinition(image="postgres:16", privileged=True),
    )
    doc.networks = {"front": NetworkConfig(driver="bridge")}

    assert ComposeDocument.from_data(yaml.safe_load(doc.to_yaml())) == doc
    assert ComposeDocument.from_data(doc.to_data(json_compatible=True)) == doc


def test_yaml_renders_healthcheck_test_inline():
    doc = _document(db=ServiceDefinition(image="postgres", healthcheck=HealthCheck(test=["CMD", "pg_isready"])))
    assert "test: [CMD, pg_isready]" in doc.to_yaml()


def test_export_rejects_unknown_format():
    with pytest.raises(UnsupportedFormatError):
        _document().export("toml")


def test_network_scalars_are_read_as_strings():
    doc = ComposeDocument.from_data({
        "version": "3",
        "services": {},
        "networks": {"front": {"name": 2024, "driver": "bridge"}},
    })
    assert doc.networks["front"].name == "2024"
    assert doc.networks["front"].driver == "bridge"
    assert doc.to_data()["networks"] == {"front": {"name": "2024", "driver": "bridge"}}


def test_network_rejects_structured_name():
    with pytest.raises(FormatError, match="name"):
        ComposeDocument.from_data({"version": "3", "services": {}, "networks": {"front": {"name": ["a"]}}})
