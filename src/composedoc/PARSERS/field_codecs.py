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
Value-level codecs for compose fields that accept more than one shape.

A decoded YAML/JSON tree is examined one node at a time: ``node_kind`` tags
the node once and each decoder maps the accepted shapes onto a single
in-memory representation. The encoders produce the canonical output shape.
"""
import re
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import FormatError

_ENV_ENTRY = re.compile(r"^(.+?)=(.+)$")

SHELL_TEST_PREFIX = "CMD-SHELL"


class NodeKind(str, Enum):
    """
    Shape of a node in a decoded document tree.
    """
    NULL = "null"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class FlowSequence(list):
    """
    A list the YAML encoder always renders inline, e.g. ``[CMD, curl, -f]``.
    """


def node_kind(node: Any) -> NodeKind:
    """
    Classifies a decoded node.

    :param node: A value produced by the YAML or JSON decoder.
    :return: The node's kind.
    """
    if node is None:
        return NodeKind.NULL
    if isinstance(node, Mapping):
        return NodeKind.MAPPING
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def decode_scalar(node: Any, field: str) -> str:
    """
    Reads a scalar node as a string, the way it was spelled in YAML where possible.

    :param node: The node to read.
    :param field: Field name used in error messages.
    :return: The string value; null becomes an empty string.
    :raises FormatError: If the node is a sequence or a mapping.
    """
    kind = node_kind(node)
    if kind is NodeKind.NULL:
        return ""
    if kind is not NodeKind.SCALAR:
        raise FormatError(f"invalid {field} format: expected a scalar, got a {kind.value}")
    if isinstance(node, bool):
        return "true" if node else "false"
    return str(node)


def decode_string_sequence(node: Any, field: str) -> List[str]:
    """
    Reads an ordered sequence of scalars (ports, volumes, networks, security_opt).
    """
    if node_kind(node) is not NodeKind.SEQUENCE:
        raise FormatError(f"invalid {field} format: expected a sequence")
    return [decode_scalar(item, field) for item in node]


def decode_depends_on(node: Any) -> Dict[str, str]:
    """
    Decodes a dependency set into ``{service name: condition}``.

    Accepted shapes::

        depends_on: [db, cache]
        depends_on:
          db: {condition: service_healthy}
          cache:

    An empty condition means "no condition". A scalar entry (``db: service_healthy``)
    is read as the condition itself, which is also the in-memory shape.

    :raises FormatError: If the node is neither a sequence nor a mapping, or a
        mapping entry is a sequence.
    """
    kind = node_kind(node)
    if kind is NodeKind.SEQUENCE:
        return {decode_scalar(item, "depends_on"): "" for item in node}
    if kind is NodeKind.MAPPING:
        deps = {}
        for name, spec in node.items():
            spec_kind = node_kind(spec)
            if spec_kind is NodeKind.NULL:
                condition = ""
            elif spec_kind is NodeKind.MAPPING:
                condition = decode_scalar(spec.get("condition"), "depends_on condition")
            elif spec_kind is NodeKind.SCALAR:
                condition = decode_scalar(spec, "depends_on condition")
            else:
                raise FormatError(f"invalid depends_on format for service {name}")
            deps[decode_scalar(name, "depends_on")] = condition
        return deps
    raise FormatError("invalid depends_on format")


def encode_depends_on(deps: Mapping[str, str]) -> Union[List[str], Dict[str, Optional[Dict[str, str]]]]:
    """
    Encodes a dependency set, using the compact list form when no entry has a condition.
    """
    if all(not condition for condition in deps.values()):
        return sorted(deps)
    return {
        name: {"condition": deps[name]} if deps[name] else None
        for name in sorted(deps)
    }


def decode_environment(node: Any) -> Dict[str, str]:
    """
    Decodes an environment set from ``["KEY=VALUE", ...]`` or ``{KEY: VALUE}``.

    The key runs up to the first ``=``; the rest is the value and must not be empty.

    :raises FormatError: On an entry without a value or a node of another kind.
    """
    kind = node_kind(node)
    if kind is NodeKind.SEQUENCE:
        env = {}
        for item in node:
            entry = decode_scalar(item, "environment")
            match = _ENV_ENTRY.match(entry)
            if not match:
                raise FormatError(f"invalid environment format: {entry}")
            env[match.group(1)] = match.group(2)
        return env
    if kind is NodeKind.MAPPING:
        return _decode_string_mapping(node, "environment")
    raise FormatError("invalid environment format")


def encode_environment(env: Mapping[str, str]) -> Dict[str, str]:
    """
    Encodes an environment set. Always the mapping form; list input is not reconstructed.
    """
    return sorted_mapping(env)


def decode_labels(node: Any) -> Dict[str, str]:
    """
    Decodes labels from a mapping or from ``["key=value", "flag"]``.
    """
    kind = node_kind(node)
    if kind is NodeKind.SEQUENCE:
        labels = {}
        for item in node:
            key, _, value = decode_scalar(item, "labels").partition("=")
            labels[key] = value
        return labels
    if kind is NodeKind.MAPPING:
        return _decode_string_mapping(node, "labels")
    raise FormatError("invalid labels format")


def decode_healthcheck_test(node: Any) -> List[str]:
    """
    Decodes a healthcheck command vector. A bare string is the shell form.
    """
    kind = node_kind(node)
    if kind is NodeKind.SEQUENCE:
        return decode_string_sequence(node, "healthcheck test")
    if kind is NodeKind.SCALAR and isinstance(node, str):
        return [SHELL_TEST_PREFIX, node]
    raise FormatError("invalid healthcheck test format")


def encode_healthcheck_test(test: List[str]) -> FlowSequence:
    """Marks a healthcheck command vector for inline rendering in YAML."""
    return FlowSequence(test)


def decode_resource_mapping(node: Any, field: str) -> Dict[str, Dict[str, Any]]:
    """
    Decodes a top-level ``name -> spec`` block (networks, volumes, secrets).

    Specs are carried as they are; a null spec becomes an empty mapping.

    :raises FormatError: If the block or one of its specs is not a mapping.
    """
    if node_kind(node) is not NodeKind.MAPPING:
        raise FormatError(f"invalid {field} format: expected a mapping")
    resources = {}
    for name, spec in node.items():
        spec_kind = node_kind(spec)
        if spec_kind is NodeKind.NULL:
            spec = {}
        elif spec_kind is not NodeKind.MAPPING:
            raise FormatError(f"invalid {field} format for {name}")
        resources[decode_scalar(name, field)] = spec
    return resources


def sorted_mapping(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of a mapping with its keys in sorted order."""
    return {key: mapping[key] for key in sorted(mapping)}


def _decode_string_mapping(node: Mapping[Any, Any], field: str) -> Dict[str, str]:
    return {decode_scalar(key, field): decode_scalar(value, field) for key, value in node.items()}
