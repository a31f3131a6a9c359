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

from typing import Any, ClassVar, NewType, Protocol

# Sized integers, a plain `int` annotation is the same as `Int64`, the native width of Lua integers.
Int8 = NewType('Int8', int)
Int16 = NewType('Int16', int)
Int32 = NewType('Int32', int)
Int64 = NewType('Int64', int)
Uint8 = NewType('Uint8', int)
Uint16 = NewType('Uint16', int)
Uint32 = NewType('Uint32', int)
# XXX: only the non-negative half of the Lua integer range is usable
Uint64 = NewType('Uint64', int)


class Dataclass(Protocol):
    """ Stands for any dataclass in a `LuaType.TypeMap`, since dataclasses have no common base class."""
    __dataclass_fields__: ClassVar[dict[str, Any]]
