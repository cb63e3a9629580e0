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
Loading and saving of compose documents in YAML or JSON.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import UnsupportedFormatError
from ..MODELS.compose_document import ComposeDocument
from ..UTILS.string_interpolation import EnvironmentInterpolator
from . import text_formats
from .text_formats import ComposeFormat

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_SUFFIX_FORMATS = {
    ".yml": ComposeFormat.YAML,
    ".yaml": ComposeFormat.YAML,
    ".json": ComposeFormat.JSON,
}


def format_for_path(path: PathLike) -> ComposeFormat:
    """
    Picks the document format from a file suffix.

    :param path: Path of the compose file.
    :return: YAML for .yml/.yaml, JSON for .json.
    :raises UnsupportedFormatError: For any other suffix.
    """
    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIX_FORMATS[suffix]
    except KeyError:
        raise UnsupportedFormatError(f"unsupported compose file format: {suffix or path}") from None


class ComposeParser:
    """
    Parser and writer for docker-compose files.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None):
        """
        Initializes the parser with an optional environment context for interpolation.

        :param context: Variables substituted for ${VAR} references before decoding.
            When omitted the text is decoded exactly as written.
        """
        self.context = context

    def parse(self, compose_path: PathLike) -> ComposeDocument:
        """
        Parses a compose file from a path. The format comes from the file suffix,
        which is checked before the file is opened.

        :param compose_path: Path to the compose file.
        :return: Parsed document.
        """
        fmt = format_for_path(compose_path)
        with open(compose_path, 'rb') as f:
            content = f.read()
        return self.load(compose_path, content, fmt)

    def parse_from_string(self, content: str, fmt: Union[ComposeFormat, str] = ComposeFormat.YAML) -> ComposeDocument:
        """
        Parses a compose document from a string.

        :param content: Text of the compose file.
        :param fmt: Format of the text, YAML unless stated.
        :return: Parsed document.
        """
        return self.load("<string>", content, fmt)

    def load(self, compose_path: PathLike, content: Union[bytes, str], fmt: Union[ComposeFormat, str]) -> ComposeDocument:
        """
        Decodes document text in the declared format and normalizes it into a ComposeDocument.

        :param compose_path: Where the text came from; only used in log messages.
        :param content: Raw text.
        :param fmt: Declared format.
        :return: Parsed document.
        :raises UnsupportedFormatError: If the format is not YAML or JSON.
        :raises FormatError: If a field has a shape the format does not allow.
        """
        fmt = ComposeFormat.from_value(fmt)
        if self.context is not None:
            if isinstance(content, bytes):
                content = content.decode("utf-8")
            content = EnvironmentInterpolator.interpolate(content, self.context)

        data = text_formats.decode(content, fmt)
        document = ComposeDocument.from_data(data)
        logger.debug("Loaded %s document %s with %d services", fmt.value, compose_path, len(document.services))
        return document

    def save(self, document: ComposeDocument, fmt: Union[ComposeFormat, str]) -> bytes:
        """
        Encodes a document in canonical form.

        :param document: The document to encode.
        :param fmt: Target format.
        :return: UTF-8 encoded text.
        :raises UnsupportedFormatError: If the format is not YAML or JSON.
        """
        fmt = ComposeFormat.from_value(fmt)
        content = document.export(fmt)
        logger.debug("Encoded document with %d services as %s", len(document.services), fmt.value)
        return content

    def dump(self, document: ComposeDocument, compose_path: PathLike) -> None:
        """
        Writes a document to a file, in the format given by the file suffix.
        """
        content = self.save(document, format_for_path(compose_path))
        with open(compose_path, 'wb') as f:
            f.write(content)
        logger.debug("Wrote %s", compose_path)
