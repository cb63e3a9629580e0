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
Unit tests for the image reference grammar.
"""
import pytest
from composedoc.REGISTRY.image_reference import ImageReference


class TestImageReference:
    """Tests for ImageReference parsing."""

    def test_parse_simple_name(self):
        """Test parsing a simple image name."""
        ref = ImageReference.parse("nginx")
        assert ref.name == "nginx"
        assert ref.tag is None
        assert ref.version == "latest"

    def test_parse_with_tag(self):
        """Test parsing image with tag."""
        ref = ImageReference.parse("nginx:1.25")
        assert ref.name == "nginx"
        assert ref.version == "1.25"

    def test_parse_registry_port_and_tag(self):
        """Test that a colon followed by a slash is a port, not a tag."""
        ref = ImageReference.parse("registry.example.com:5000/app:1.0")
        assert ref.name == "registry.example.com:5000/app"
        assert ref.version == "1.0"

    def test_parse_registry_port_without_tag(self):
        ref = ImageReference.parse("localhost:5000/myimage")
        assert ref.name == "localhost:5000/myimage"
        assert ref.version == "latest"

    def test_parse_splits_at_last_colon(self):
        ref = ImageReference.parse("a:b:c")
        assert ref.name == "a:b"
        assert ref.tag == "c"

    @pytest.mark.parametrize("reference", ["", "nginx:"])
    def test_degenerate_references(self, reference):
        """Test that malformed references degrade instead of raising."""
        ref = ImageReference.parse(reference)
        assert ref.name == reference
        assert ref.version == "latest"

    def test_with_tag_always_renders_tag(self):
        assert ImageReference.parse("nginx").with_tag("latest") == "nginx:latest"
        assert ImageReference.parse("nginx:1.25").with_tag("2.0") == "nginx:2.0"

    def test_str_representation(self):
        """Test string representation."""
        assert str(ImageReference.parse("nginx:1.25")) == "nginx:1.25"
        assert str(ImageReference.parse("nginx")) == "nginx"
