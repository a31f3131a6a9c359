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

"""
Cursors handed to visitors so they can pull the contents of a table one piece at a time.

A visitor pulls only what it needs, the `Deserializer` that created the cursor checks afterwards that nothing was
left behind, see `SeqAccess.remaining` and `MapAccess.remaining`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional, TypeVar

from luaserde.exception import LuaSerdeError
from luaserde.value import LuaTable, LuaValue, sequence_values, table_pairs

if TYPE_CHECKING:
    from luaserde.conf.settings import ConverterSettings
    from luaserde.serialization.deserializer import Deserializer
    from luaserde.serialization.visitor import Visitor

T = TypeVar('T')

_MISSING = object()


class SeqAccess:
    """ Iterates over one `Deserializer` per element of t[1], t[2], ... until the first nil.
    """

    __slots__ = ('_deserializer', '_values')

    def __init__(self, deserializer: Deserializer, table: LuaTable) -> None:
        self._deserializer = deserializer
        self._values = sequence_values(table)

    @property
    def settings(self) -> ConverterSettings:
        return self._deserializer.settings

    def __iter__(self) -> Iterator[Deserializer]:
        return self

    def __next__(self) -> Deserializer:
        return self._deserializer.child(next(self._values))

    def next_element(self) -> Optional[Deserializer]:
        """ The next element, or None when the sequence is over."""
        return next(self, None)

    def remaining(self) -> int:
        """ Consume and count the elements the visitor did not pull."""
        return sum(1 for _ in self._values)


class MapAccess:
    """ Iterates over the pairs of a table, the key and the value of each pair are pulled in two separate steps.
    """

    __slots__ = ('_deserializer', '_pairs', '_value', '_exclude')

    def __init__(self, deserializer: Deserializer, table: LuaTable, *, exclude: frozenset[str] = frozenset()) -> None:
        self._deserializer = deserializer
        self._pairs = table_pairs(table)
        self._value: LuaValue = _MISSING
        self._exclude = exclude

    @property
    def settings(self) -> ConverterSettings:
        return self._deserializer.settings

    def _next_pair(self) -> Optional[tuple[LuaValue, LuaValue]]:
        for key, value in self._pairs:
            # XXX: keys used as an enum tag are not part of the payload
            if isinstance(key, str) and key in self._exclude:
                continue
            return key, value
        return None

    def next_key(self) -> Optional[Deserializer]:
        """ The key of the next pair, or None when there are no more pairs."""
        pair = self._next_pair()
        if pair is None:
            self._value = _MISSING
            return None
        key, self._value = pair
        return self._deserializer.child(key)

    def next_value(self) -> Deserializer:
        """ The value of the pair whose key was the last one returned by `next_key`."""
        if self._value is _MISSING:
            raise LuaSerdeError('value is missing')
        value, self._value = self._value, _MISSING
        return self._deserializer.child(value)

    def next_entry(self) -> Optional[tuple[Deserializer, Deserializer]]:
        key = self.next_key()
        if key is None:
            return None
        return key, self.next_value()

    def __iter__(self) -> Iterator[tuple[Deserializer, Deserializer]]:
        while (entry := self.next_entry()) is not None:
            yield entry

    def remaining(self) -> int:
        """ Consume and count the pairs the visitor did not pull."""
        count = 0
        while self._next_pair() is not None:
            count += 1
        return count


class EnumAccess:
    """ Gives the visitor the variant name first, and then access to the payload according to the variant kind.
    """

    __slots__ = ('_variant', '_payload', '_internally_tagged')

    def __init__(self, variant: str, payload: Optional[Deserializer], *, internally_tagged: bool = False) -> None:
        self._variant = variant
        self._payload = payload
        self._internally_tagged = internally_tagged

    def variant(self) -> tuple[str, VariantAccess]:
        return self._variant, VariantAccess(self._payload, internally_tagged=self._internally_tagged)


class VariantAccess:
    """ Checks that the payload matches the variant kind the visitor asks for."""

    __slots__ = ('_payload', '_internally_tagged')

    def __init__(self, payload: Optional[Deserializer], *, internally_tagged: bool = False) -> None:
        self._payload = payload
        self._internally_tagged = internally_tagged

    def unit_variant(self) -> None:
        # XXX: an internally tagged unit variant is a table too, whatever else is in it gets ignored
        if self._payload is not None and not self._internally_tagged:
            raise LuaSerdeError.invalid_type('newtype variant', 'unit variant')

    def newtype_variant(self) -> Deserializer:
        if self._payload is None:
            raise LuaSerdeError.invalid_type('unit variant', 'newtype variant')
        return self._payload

    def tuple_variant(self, visitor: Visitor[T]) -> T:
        if self._payload is None:
            raise LuaSerdeError.invalid_type('unit variant', 'tuple variant')
        return self._payload.deserialize_seq(visitor)

    def struct_variant(self, visitor: Visitor[T]) -> T:
        if self._payload is None:
            raise LuaSerdeError.invalid_type('unit variant', 'struct variant')
        return self._payload.deserialize_map(visitor)
