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
Base model shared by every compose entity.
"""
from typing import Any, ClassVar, Dict, Tuple
from pydantic import BaseModel, ConfigDict, model_serializer


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    return isinstance(value, (str, list, dict)) and not value


class ComposeModel(BaseModel):
    """
    Keeps unknown fields and serializes in canonical form.

    On output, declared fields holding None, False, '' or an empty collection are
    left out unless listed in ``always_emit``; unknown fields are written back untouched.
    Subclasses put their field encoders in ``encode_fields``.
    """
    model_config = ConfigDict(extra="allow")

    always_emit: ClassVar[Tuple[str, ...]] = ()

    @model_serializer(mode="wrap")
    def serialize_canonical(self, handler) -> Dict[str, Any]:
        data = handler(self)
        for field in type(self).model_fields:
            if field in data and field not in self.always_emit and _is_empty(data[field]):
                del data[field]
        return self.encode_fields(data)

    def encode_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return data
