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
composedoc - docker-compose documents as typed Python models

Loads compose files written in YAML or JSON, normalizes the fields the format
allows in several shapes, and writes them back in one canonical form.
"""

__version__ = "0.1.0"
__author__ = "Michael Maillet, Damien Davison, Sacha Davison"
__license__ = "Apache-2.0"

from .errors import ComposeError, FormatError, UnsupportedFormatError
from .MODELS.compose_document import ComposeDocument, NetworkConfig
from .MODELS.service_definition import HealthCheck, ServiceDefinition
from .PARSERS.compose_parser import ComposeParser, format_for_path
from .PARSERS.text_formats import ComposeFormat

__all__ = [
    "ComposeDocument",
    "ComposeError",
    "ComposeFormat",
    "ComposeParser",
    "FormatError",
    "HealthCheck",
    "NetworkConfig",
    "ServiceDefinition",
    "UnsupportedFormatError",
    "format_for_path",
]
