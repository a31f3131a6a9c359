#  Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Settings that tune how values are converted to and from Lua."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import pydantic
from typing_extensions import Self

from luaserde.utils.yaml import dict_from_yaml

PositiveInt = Annotated[int, pydantic.Field(ge=1, strict=True)]


class ConverterSettings(pydantic.BaseModel):
    """Immutable converter configuration.

    Attributes:
        max_depth: Maximum nesting depth of tables/containers, in both directions
        deny_unknown_fields: Whether decoding a dataclass fails on keys that are not fields
        empty_table_as_map: Whether an empty table is accepted as an empty map by map and struct targets
    """
    model_config = pydantic.ConfigDict(frozen=True, extra='forbid')

    # Recursion guard, cyclic tables would otherwise recurse forever
    max_depth: PositiveInt = 128

    # Dataclass decoding
    deny_unknown_fields: bool = False

    # An empty table is always a sequence by default, even when a map is expected
    empty_table_as_map: bool = False

    @classmethod
    def from_yaml(cls, *, filepath: Path | str) -> Self:
        """Takes a filepath to a yaml file and returns the validated settings."""
        return cls.model_validate(dict_from_yaml(filepath=filepath))


DEFAULT_SETTINGS = ConverterSettings()
