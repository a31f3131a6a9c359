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

from collections.abc import Iterable
from typing import Any, Callable, TypeVar

from lupa import LuaError

T = TypeVar('T')

# Failures that lupa raises while moving values across the Python/Lua boundary, besides LuaError itself.
_RUNTIME_ERRORS: tuple[type[Exception], ...] = (LuaError, OverflowError, TypeError, UnicodeError)


class LuaSerdeError(Exception):
    """The single error kind raised when converting values to or from Lua.

    It only ever carries a message string, never a live object from the Lua runtime, so it is safe to keep around
    after the runtime is gone and to hand over to another thread.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @classmethod
    def custom(cls, message: Any) -> 'LuaSerdeError':
        return cls(str(message))

    @classmethod
    def invalid_type(cls, unexpected: str, expected: Any) -> 'LuaSerdeError':
        return cls(f'invalid type: {unexpected}, expected {_expecting(expected)}')

    @classmethod
    def invalid_value(cls, unexpected: str, expected: Any) -> 'LuaSerdeError':
        return cls(f'invalid value: {unexpected}, expected {_expecting(expected)}')

    @classmethod
    def invalid_length(cls, length: int, expected: Any) -> 'LuaSerdeError':
        return cls(f'invalid length {length}, expected {_expecting(expected)}')

    @classmethod
    def unknown_variant(cls, variant: str, expected: Iterable[str]) -> 'LuaSerdeError':
        return cls(f'unknown variant `{variant}`, {_one_of(expected, "variants")}')

    @classmethod
    def unknown_field(cls, field: str, expected: Iterable[str]) -> 'LuaSerdeError':
        return cls(f'unknown field `{field}`, {_one_of(expected, "fields")}')

    @classmethod
    def missing_field(cls, field: str) -> 'LuaSerdeError':
        return cls(f'missing field `{field}`')


def _expecting(expected: Any) -> str:
    # visitors describe themselves through `expecting()`, anything else is used as-is
    expecting = getattr(expected, 'expecting', None)
    if callable(expecting):
        return str(expecting())
    return str(expected)


def _one_of(names: Iterable[str], noun: str) -> str:
    names = list(names)
    if not names:
        return f'there are no {noun}'
    if len(names) == 1:
        return f'expected `{names[0]}`'
    return 'expected one of ' + ', '.join(f'`{name}`' for name in names)


def lua_call(func: Callable[..., T], /, *args: Any) -> T:
    """Call a Lua runtime primitive, converting any runtime failure into a `LuaSerdeError`.

    The message is extracted inside the `except` block but the new exception is raised outside of it, that way the
    raised error has neither `__cause__` nor `__context__` pointing back at the runtime's exception object.
    """
    try:
        return func(*args)
    except LuaSerdeError:
        raise
    except _RUNTIME_ERRORS as e:
        message = str(e) or type(e).__name__
    raise LuaSerdeError(message)
