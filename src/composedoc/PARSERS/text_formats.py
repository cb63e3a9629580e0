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
Text encodings of a compose document: YAML (indentation based) and JSON.
"""
import json
import re
from enum import Enum
from typing import Any, Union

import yaml

from ..errors import UnsupportedFormatError
from .field_codecs import FlowSequence


class ComposeFormat(str, Enum):
    """
    Supported document encodings.
    """
    YAML = "yaml"
    JSON = "json"

    @classmethod
    def from_value(cls, value: Union["ComposeFormat", str]) -> "ComposeFormat":
        """
        Resolves a declared format.

        :param value: A ComposeFormat or its string value ('yaml', 'json').
        :raises UnsupportedFormatError: For any other value.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedFormatError(f"unsupported compose file format: {value}") from None


_YAML11_ONLY_TAGS = {
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
    "tag:yaml.org,2002:value",
}


class ComposeLoader(yaml.SafeLoader):
    """
    Safe loader resolving plain scalars with the YAML 1.2 core schema.

    'yes', 'on', '22:22' and '2024-01-01' stay strings. A number is only built
    when it prints back the way it was written: '010', '1.10' and '+5' stay strings.
    """
    def construct_core_int(self, node: yaml.ScalarNode) -> Union[int, str]:
        text = self.construct_scalar(node)
        try:
            value = int(text)
        except ValueError:
            # explicit !!int 0x1F, 0o17, 1_000
            return self.construct_yaml_int(node)
        return value if str(value) == text else text

    def construct_core_float(self, node: yaml.ScalarNode) -> Union[float, str]:
        text = self.construct_scalar(node)
        try:
            value = float(text)
        except ValueError:
            # .inf, -.Inf, .nan
            return self.construct_yaml_float(node)
        return value if repr(value) == text else text


ComposeLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _YAML11_ONLY_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ComposeLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
ComposeLoader.add_implicit_resolver(
    "tag:yaml.org,2002:int",
    re.compile(r"^[-+]?[0-9]+$"),
    list("-+0123456789"),
)
ComposeLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(r"""^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?
                  |[-+]?\.(?:inf|Inf|INF)
                  |\.(?:nan|NaN|NAN))$""", re.X),
    list("-+.0123456789"),
)
ComposeLoader.add_constructor("tag:yaml.org,2002:int", ComposeLoader.construct_core_int)
ComposeLoader.add_constructor("tag:yaml.org,2002:float", ComposeLoader.construct_core_float)


class ComposeDumper(yaml.SafeDumper):
    """
    Block-style YAML dumper that never emits anchors and renders FlowSequence inline.
    """
    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_flow_sequence(dumper: yaml.SafeDumper, data: FlowSequence) -> yaml.SequenceNode:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", list(data), flow_style=True)


ComposeDumper.add_representer(FlowSequence, _represent_flow_sequence)


def decode(content: Union[bytes, str], fmt: ComposeFormat) -> Any:
    """
    Decodes document text into a plain tree. Decoder errors are not wrapped.

    :raises yaml.YAMLError: On malformed YAML.
    :raises json.JSONDecodeError: On malformed JSON.
    """
    if fmt is ComposeFormat.YAML:
        return yaml.load(content, Loader=ComposeLoader)
    return json.loads(content)


def encode(data: Any, fmt: ComposeFormat) -> bytes:
    """
    Encodes a plain tree as UTF-8 text, keeping the tree's key order.
    """
    if fmt is ComposeFormat.YAML:
        text = yaml.dump(
            data,
            Dumper=ComposeDumper,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
    else:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return text.encode("utf-8")
