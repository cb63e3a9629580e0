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
Image reference handling for the ``image`` field of a service.
Splits references like 'nginx:1.25' or 'registry.example.com:5000/app:1.0'
into a name and a tag.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class ImageReference:
    """
    Image reference split into name and optional tag.

    The tag is whatever follows the last colon, unless that text is empty or
    contains a slash (then the colon belongs to a registry port).

    Examples:
        - nginx -> name 'nginx', no tag (version 'latest')
        - nginx:1.25 -> name 'nginx', tag '1.25'
        - localhost:5000/app -> name 'localhost:5000/app', no tag
        - registry.example.com:5000/app:1.0 -> name 'registry.example.com:5000/app', tag '1.0'
    """

    name: str
    tag: Optional[str] = None

    DEFAULT_TAG = "latest"

    @classmethod
    def parse(cls, reference: str) -> "ImageReference":
        """
        Parse an image reference string. Never raises; an empty reference has an empty name.

        Args:
            reference: Image reference string (e.g., 'nginx:latest', 'myuser/myimage:v1')

        Returns:
            Parsed ImageReference object.
        """
        reference = reference or ""
        before_colon, colon, after_colon = reference.rpartition(":")
        if colon and before_colon and after_colon and "/" not in after_colon:
            return cls(name=before_colon, tag=after_colon)
        return cls(name=reference)

    @property
    def version(self) -> str:
        """Tag, or 'latest' when the reference has none."""
        return self.tag or self.DEFAULT_TAG

    def with_tag(self, tag: str) -> str:
        """Render the reference with a new tag. The tag is always written, even 'latest'."""
        return f"{self.name}:{tag}"

    def __str__(self) -> str:
        if self.tag:
            return f"{self.name}:{self.tag}"
        return self.name
