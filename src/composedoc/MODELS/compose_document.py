# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Model of a whole compose document.
"""
from typing import Any, ClassVar, Dict, Optional, Tuple, Union
from pydantic import ValidationError, field_validator, model_validator

from .compose_model import ComposeModel
from .service_definition import ServiceDefinition
from ..errors import FormatError
from ..PARSERS import field_codecs
from ..PARSERS.text_formats import ComposeFormat, encode


class NetworkConfig(ComposeModel):
    """
    Top-level network definition. Driver options and IPAM settings are carried as unknown fields.
    """
    name: Optional[str] = None
    driver: Optional[str] = None
    external: bool = False

    @field_validator("name", "driver", mode="before")
    @classmethod
    def decode_string(cls, value: Any, info) -> Optional[str]:
        if value is None:
            return None
        return field_codecs.decode_scalar(value, info.field_name)


class ComposeDocument(ComposeModel):
    """
    Complete configuration for a multi-service stack, equivalent to a parsed
    docker-compose.yml file.

    Volumes and secrets are opaque specs: decoded and re-encoded, never interpreted.
    """
    always_emit: ClassVar[Tuple[str, ...]] = ("version", "services")

    version: str
    services: Dict[str, ServiceDefinition]
    networks: Optional[Dict[str, NetworkConfig]] = None
    volumes: Optional[Dict[str, Dict[str, Any]]] = None
    secrets: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def from_data(cls, data: Any) -> "ComposeDocument":
        """
        Builds a document from a decoded YAML/JSON tree.

        :param data: The decoded tree.
        :return: The document, with service names attached.
        :raises FormatError: If the tree does not describe a compose document.
        """
        if field_codecs.node_kind(data) is not field_codecs.NodeKind.MAPPING:
            raise FormatError("compose document must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise FormatError(f"invalid compose document: {e}") from e

    @field_validator("version", mode="before")
    @classmethod
    def decode_version(cls, value: Any) -> Any:
        if value is None:
            return None
        return field_codecs.decode_scalar(value, "version")

    @field_validator("services", mode="before")
    @classmethod
    def decode_services(cls, value: Any) -> Any:
        if field_codecs.node_kind(value) is not field_codecs.NodeKind.MAPPING:
            raise FormatError("invalid services format: expected a mapping")
        return {field_codecs.decode_scalar(name, "services"): spec for name, spec in value.items()}

    @field_validator("networks", "volumes", "secrets", mode="before")
    @classmethod
    def decode_resources(cls, value: Any, info) -> Any:
        if value is None:
            return None
        return field_codecs.decode_resource_mapping(value, info.field_name)

    @model_validator(mode="after")
    def attach_service_names(self) -> "ComposeDocument":
        for name, service in self.services.items():
            service.bind_name(name)
        return self

    def encode_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data["services"] = field_codecs.sorted_mapping(data["services"])
        for field in ("networks", "volumes", "secrets"):
            if field in data:
                data[field] = field_codecs.sorted_mapping(data[field])
        return data

    def get_service(self, name: str) -> Optional[ServiceDefinition]:
        """
        Looks a service up by name.

        :return: The service, or None when the document has no such service.
        """
        return self.services.get(name)

    def set_service(self, name: str, service: ServiceDefinition) -> None:
        """
        Adds a service, silently replacing any service stored under the same name.
        """
        service.bind_name(name)
        self.services[name] = service

    def to_data(self, json_compatible: bool = False) -> Dict[str, Any]:
        """
        Canonical plain tree of the document: service keys sorted, empty fields left out.

        :param json_compatible: Convert opaque values (e.g. YAML timestamps) to JSON types.
        """
        return self.model_dump(mode="json" if json_compatible else "python")

    def export(self, fmt: Union[ComposeFormat, str]) -> bytes:
        """
        Encodes the document as canonical YAML or JSON text.

        :param fmt: Target format.
        :return: UTF-8 encoded text.
        :raises UnsupportedFormatError: If the format is not YAML or JSON.
        """
        fmt = ComposeFormat.from_value(fmt)
        if fmt is ComposeFormat.JSON:
            return encode(self.to_data(json_compatible=True), fmt)
        data = self.to_data()
        for service in data["services"].values():
            healthcheck = service.get("healthcheck")
            if healthcheck and "test" in healthcheck:
                healthcheck["test"] = field_codecs.encode_healthcheck_test(healthcheck["test"])
        return encode(data, fmt)

    def to_yaml(self) -> str:
        return self.export(ComposeFormat.YAML).decode("utf-8")

    def to_json(self) -> str:
        return self.export(ComposeFormat.JSON).decode("utf-8")
