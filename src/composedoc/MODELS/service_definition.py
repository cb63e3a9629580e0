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
Models for defining services: the service record itself and its health check.
"""
from typing import Any, ClassVar, Dict, List, Optional, Tuple
from pydantic import Field, PrivateAttr, field_validator

from .compose_model import ComposeModel
from ..PARSERS import field_codecs
from ..REGISTRY.image_reference import ImageReference

GIT_REPOSITORY_LABEL = "git.repository"


class HealthCheck(ComposeModel):
    """
    Command run to check the health of a service. Durations are kept as written ('30s').
    """
    test: Optional[List[str]] = None
    timeout: Optional[str] = None
    interval: Optional[str] = None
    retries: Optional[int] = Field(default=None, ge=0)
    start_period: Optional[str] = None
    disable: bool = False

    @field_validator("test", mode="before")
    @classmethod
    def decode_test(cls, value: Any) -> Optional[List[str]]:
        if value is None:
            return None
        return field_codecs.decode_healthcheck_test(value)

    @field_validator("timeout", "interval", "start_period", mode="before")
    @classmethod
    def decode_duration(cls, value: Any, info) -> Optional[str]:
        if value is None:
            return None
        return field_codecs.decode_scalar(value, info.field_name)


class ServiceDefinition(ComposeModel):
    """
    One service of a compose document.

    The service name is the key under which the document stores the record.
    It is attached after decoding and never serialized.
    """
    always_emit: ClassVar[Tuple[str, ...]] = ("image",)

    image: str
    container_name: Optional[str] = None
    hostname: Optional[str] = None
    restart: Optional[str] = None

    # Environment
    environment: Optional[Dict[str, str]] = None

    # Opaque logging driver configuration
    logging: Optional[Dict[str, Any]] = None

    # Operational arguments, order preserved
    networks: Optional[List[str]] = None
    ports: Optional[List[str]] = None
    volumes: Optional[List[str]] = None

    # Metadata
    labels: Optional[Dict[str, str]] = None

    # Lifecycle
    depends_on: Optional[Dict[str, str]] = None
    healthcheck: Optional[HealthCheck] = None

    # Security
    privileged: bool = False
    security_opt: Optional[List[str]] = None

    _name: Optional[str] = PrivateAttr(default=None)

    @field_validator("image", "container_name", "hostname", "restart", mode="before")
    @classmethod
    def decode_string(cls, value: Any, info) -> Optional[str]:
        if value is None:
            return None
        return field_codecs.decode_scalar(value, info.field_name)

    @field_validator("networks", "ports", "volumes", "security_opt", mode="before")
    @classmethod
    def decode_sequence(cls, value: Any, info) -> Optional[List[str]]:
        if value is None:
            return None
        return field_codecs.decode_string_sequence(value, info.field_name)

    @field_validator("environment", mode="before")
    @classmethod
    def decode_environment(cls, value: Any) -> Optional[Dict[str, str]]:
        if value is None:
            return None
        return field_codecs.decode_environment(value)

    @field_validator("labels", mode="before")
    @classmethod
    def decode_labels(cls, value: Any) -> Optional[Dict[str, str]]:
        if value is None:
            return None
        return field_codecs.decode_labels(value)

    @field_validator("depends_on", mode="before")
    @classmethod
    def decode_depends_on(cls, value: Any) -> Optional[Dict[str, str]]:
        if value is None:
            return None
        return field_codecs.decode_depends_on(value)

    def encode_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if "environment" in data:
            data["environment"] = field_codecs.encode_environment(data["environment"])
        if "labels" in data:
            data["labels"] = field_codecs.sorted_mapping(data["labels"])
        if "depends_on" in data:
            data["depends_on"] = field_codecs.encode_depends_on(data["depends_on"])
        return data

    @property
    def name(self) -> Optional[str]:
        """Key of this service in its document, None while detached."""
        return self._name

    def bind_name(self, name: str) -> None:
        self._name = name

    @property
    def image_reference(self) -> ImageReference:
        return ImageReference.parse(self.image)

    def get_image_name(self) -> str:
        """
        Image without its tag, e.g. 'nginx' for 'nginx:1.25'.
        """
        return self.image_reference.name

    def get_version(self) -> str:
        """
        Image tag, 'latest' when the image has none.
        """
        return self.image_reference.version

    def set_version(self, version: str) -> None:
        """
        Replaces the image tag. The result is always rendered as 'name:tag'.

        :param version: The new tag.
        """
        self.image = self.image_reference.with_tag(version)

    def get_git_registry(self) -> str:
        """
        Value of the 'git.repository' label, or an empty string.
        """
        if not self.labels:
            return ""
        return self.labels.get(GIT_REPOSITORY_LABEL, "")
