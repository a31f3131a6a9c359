from typing import Any

from luaserde.conf import ConverterSettings
from luaserde.exception import LuaSerdeError
from luaserde.serialization import Deserializer, EnumAccess, MapAccess, SeqAccess, Visitor
from luaserde_tests import unittest


class Recorder(Visitor[Any]):
    """ Accepts everything and tells what it was given."""

    def expecting(self) -> str:
        return 'anything'

    def visit_unit(self) -> Any:
        return ('unit',)

    def visit_bool(self, value: bool, /) -> Any:
        return ('bool', value)

    def visit_int(self, value: int, /) -> Any:
        return ('int', value)

    def visit_float(self, value: float, /) -> Any:
        return ('float', value)

    def visit_str(self, value: str, /) -> Any:
        return ('str', value)

    def visit_bytes(self, value: bytes, /) -> Any:
        return ('bytes', value)

    def visit_none(self) -> Any:
        return ('none',)

    def visit_some(self, deserializer: Deserializer, /) -> Any:
        return ('some', deserializer.deserialize_any(self))

    def visit_seq(self, seq: SeqAccess, /) -> Any:
        return ('seq', [element.deserialize_any(self) for element in seq])

    def visit_map(self, map: MapAccess, /) -> Any:
        return ('map', sorted((k.deserialize_any(self), v.deserialize_any(self)) for k, v in map))

    def visit_enum(self, data: EnumAccess, /) -> Any:
        name, variant = data.variant()
        if name == 'Unit':
            variant.unit_variant()
            return ('enum', name)
        if name == 'Tuple':
            return ('enum', name, variant.tuple_variant(self))
        if name == 'Struct':
            return ('enum', name, variant.struct_variant(self))
        return ('enum', name, variant.newtype_variant().deserialize_any(self))


class TakeOne(Recorder):
    """ Pulls a single element or pair and leaves the rest behind."""

    def visit_seq(self, seq: SeqAccess, /) -> Any:
        element = seq.next_element()
        assert element is not None
        return element.deserialize_any(Recorder())

    def visit_map(self, map: MapAccess, /) -> Any:
        entry = map.next_entry()
        assert entry is not None
        return entry[1].deserialize_any(Recorder())


class DeserializerTestCase(unittest.TestCase):
    def deserialize_any(self, code: str) -> Any:
        return Deserializer(self.eval(code)).deserialize_any(Recorder())

    def test_any_primitives(self) -> None:
        self.assertEqual(self.deserialize_any('nil'), ('unit',))
        self.assertEqual(self.deserialize_any('true'), ('bool', True))
        self.assertEqual(self.deserialize_any('42'), ('int', 42))
        self.assertEqual(self.deserialize_any('1.5'), ('float', 1.5))
        self.assertEqual(self.deserialize_any('"hi"'), ('str', 'hi'))

    def test_any_tables(self) -> None:
        self.assertEqual(self.deserialize_any('{1, 2}'), ('seq', [('int', 1), ('int', 2)]))
        self.assertEqual(self.deserialize_any('{a = 1}'), ('map', [(('str', 'a'), ('int', 1))]))
        self.assertEqual(self.deserialize_any('{}'), ('seq', []))

    def test_any_function_is_invalid(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_any('function() end')
        self.assertEqual(cm.exception.message, 'invalid value type')

    def test_any_coroutine_is_invalid(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_any('coroutine.create(function() end)')
        self.assertEqual(cm.exception.message, 'invalid value type')

    def test_visitor_must_describe_itself(self) -> None:
        class Nameless(Visitor[Any]):
            pass

        with self.assertRaises(TypeError):
            Nameless()  # type: ignore[abstract]

    def test_option(self) -> None:
        self.assertEqual(Deserializer(None).deserialize_option(Recorder()), ('none',))
        self.assertEqual(Deserializer(3).deserialize_option(Recorder()), ('some', ('int', 3)))

    def test_seq_requires_a_table(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            Deserializer('abc').deserialize_seq(Recorder())
        self.assertEqual(cm.exception.message, 'invalid value type')

    def test_seq_reads_up_to_the_first_nil(self) -> None:
        table = self.eval('{[1] = 1, [2] = 2, [4] = 4}')
        self.assertEqual(Deserializer(table).deserialize_seq(Recorder()), ('seq', [('int', 1), ('int', 2)]))

    def test_seq_leftover_elements(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            Deserializer(self.eval('{1, 2, 3}')).deserialize_seq(TakeOne())
        self.assertEqual(cm.exception.message, 'invalid length 3, expected fewer elements in array')

    def test_map_leftover_pairs(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            Deserializer(self.eval('{a = 1, b = 2}')).deserialize_map(TakeOne())
        self.assertEqual(cm.exception.message, 'invalid length 0, expected fewer elements in array')

    def test_map_value_before_key(self) -> None:
        class ValueFirst(Recorder):
            def visit_map(self, map: MapAccess, /) -> Any:
                return map.next_value()

        with self.assertRaises(LuaSerdeError) as cm:
            Deserializer(self.eval('{a = 1}')).deserialize_map(ValueFirst())
        self.assertEqual(cm.exception.message, 'value is missing')

    def test_empty_table_as_map(self) -> None:
        self.assertEqual(Deserializer(self.eval('{}')).deserialize_map(Recorder()), ('seq', []))
        settings = ConverterSettings(empty_table_as_map=True)
        self.assertEqual(Deserializer(self.eval('{}'), settings=settings).deserialize_map(Recorder()), ('map', []))
        # only map targets are affected
        self.assertEqual(Deserializer(self.eval('{}'), settings=settings).deserialize_any(Recorder()), ('seq', []))

    def test_decoding_does_not_change_the_table(self) -> None:
        table = self.eval('{1, 2, {x = "y"}}')
        before = self.lua_repr(table)
        first = Deserializer(table).deserialize_any(Recorder())
        second = Deserializer(table).deserialize_any(Recorder())
        self.assertEqual(first, second)
        self.assertEqual(self.lua_repr(table), before)


class EnumDeserializerTestCase(unittest.TestCase):
    def deserialize_enum(self, code: str) -> Any:
        return Deserializer(self.eval(code)).deserialize_enum(Recorder())

    def test_unit(self) -> None:
        self.assertEqual(self.deserialize_enum('"Unit"'), ('enum', 'Unit'))

    def test_newtype(self) -> None:
        self.assertEqual(self.deserialize_enum('{Newtype = 5}'), ('enum', 'Newtype', ('int', 5)))

    def test_tuple(self) -> None:
        self.assertEqual(
            self.deserialize_enum('{Tuple = {1, "a"}}'),
            ('enum', 'Tuple', ('seq', [('int', 1), ('str', 'a')])),
        )

    def test_struct(self) -> None:
        self.assertEqual(
            self.deserialize_enum('{Struct = {x = 1}}'),
            ('enum', 'Struct', ('map', [(('str', 'x'), ('int', 1))])),
        )

    def test_two_entries(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_enum('{A = 1, B = 2}')
        self.assertEqual(cm.exception.message, 'invalid value: map, expected map with a single key')

    def test_zero_entries(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_enum('{}')
        self.assertEqual(cm.exception.message, 'invalid value: map, expected map with a single key')

    def test_not_a_string_or_table(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_enum('1')
        self.assertEqual(cm.exception.message, 'bad enum value')

    def test_variant_kind_mismatch(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_enum('"Tuple"')
        self.assertEqual(cm.exception.message, 'invalid type: unit variant, expected tuple variant')
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_enum('{Unit = 1}')
        self.assertEqual(cm.exception.message, 'invalid type: newtype variant, expected unit variant')
        with self.assertRaises(LuaSerdeError) as cm:
            self.deserialize_enum('"Newtype"')
        self.assertEqual(cm.exception.message, 'invalid type: unit variant, expected newtype variant')

    def test_internally_tagged(self) -> None:
        table = self.eval('{id = "Struct", x = 1}')
        result = Deserializer(table).deserialize_internally_tagged_enum('id', Recorder())
        self.assertEqual(result, ('enum', 'Struct', ('map', [(('str', 'x'), ('int', 1))])))

    def test_internally_tagged_without_tag(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            Deserializer(self.eval('{x = 1}')).deserialize_internally_tagged_enum('id', Recorder())
        self.assertEqual(cm.exception.message, 'missing field `id`')
