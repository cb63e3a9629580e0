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
Error kinds raised while loading and saving compose documents.
"""


class ComposeError(Exception):
    """
    Base class for every error raised by composedoc.
    """


class FormatError(ComposeError):
    """
    A node of the document does not have any shape accepted for its field.

    Deliberately not a ValueError: pydantic only wraps ValueError and
    AssertionError raised inside validators, so this one reaches the caller as-is.
    """


class UnsupportedFormatError(ComposeError):
    """
    The declared document format is neither YAML nor JSON.
    """


class InterpolationError(FormatError):
    """
    A required variable (${VAR:?message}) is not set in the interpolation context.
    """


class CircularDependencyError(ComposeError):
    """
    Services depend on each other in a cycle.
    """
