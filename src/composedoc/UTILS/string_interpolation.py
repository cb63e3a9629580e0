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
Utilities for string interpolation using environment variables.
"""
import logging
import re
from typing import Mapping

from ..errors import InterpolationError

logger = logging.getLogger(__name__)

_PATTERN = re.compile(
    r"""
    \$(?:
        (?P<escaped>\$)
      | (?P<named>[A-Za-z_][A-Za-z0-9_]*)
      | \{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<modifier>:?[-+?])(?P<argument>[^}]*))?\}
    )
    """,
    re.VERBOSE,
)


class EnvironmentInterpolator:
    """
    Utility for interpolating environment variables in compose text.

    Supports $$, $VAR, ${VAR}, ${VAR:-default}, ${VAR-default}, ${VAR:+value},
    ${VAR+value}, ${VAR:?message} and ${VAR?message}. The colon forms treat an
    empty variable as unset.
    """
    @staticmethod
    def interpolate(template: str, context: Mapping[str, str]) -> str:
        """
        Interpolates environment variables in the template string using the provided context.

        :param template: The string containing ${VAR} placeholders.
        :param context: The environment variables context.
        :return: The interpolated string.
        :raises InterpolationError: If a ${VAR:?message} variable is unset.
        """
        def replace(match: re.Match) -> str:
            if match.group("escaped"):
                return "$"

            var_name = match.group("named") or match.group("braced")
            modifier = match.group("modifier")
            value = context.get(var_name)

            if not modifier:
                if value is None:
                    # Docker resolves an unset ${VAR} to an empty string
                    logger.warning("The %s variable is not set. Defaulting to a blank string.", var_name)
                    return ""
                return value

            argument = match.group("argument")
            is_set = value is not None and (value != "" or not modifier.startswith(":"))
            operator = modifier[-1]
            if operator == "-":
                return value if is_set else argument
            if operator == "+":
                return argument if is_set else ""
            if not is_set:
                raise InterpolationError(f"required variable {var_name} is missing a value: {argument or var_name}")
            return value

        return _PATTERN.sub(replace, template)
