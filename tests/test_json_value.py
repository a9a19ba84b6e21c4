import sys
import unittest
from pathlib import Path


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_ROOT))

from homed_devlist.json_value import (  # noqa: E402
    JsonArray,
    JsonError,
    JsonNumber,
    JsonObject,
    JsonString,
    Key,
    TypeMismatchError,
)


class TestKey(unittest.TestCase):
    def test_equality_and_hash_ignore_line(self) -> None:
        self.assertEqual(Key("description", 12), Key("description"))
        self.assertEqual(hash(Key("description", 12)), hash(Key("description", 3)))
        self.assertNotEqual(Key("a", 1), Key("b", 1))

    def test_ordering_uses_text(self) -> None:
        keys = [Key("b", 1), Key("a", 9), Key("c", 0)]
        self.assertEqual([key.text for key in sorted(keys)], ["a", "b", "c"])

    def test_null_key(self) -> None:
        self.assertTrue(Key.null().is_null)
        self.assertFalse(Key("a").is_null)
        self.assertFalse(Key(None, 4).is_null)


class TestJsonObject(unittest.TestCase):
    def test_lookup_by_text(self) -> None:
        obj = JsonObject()
        obj.set(Key("description", 7), JsonString("Lamp"))

        key, value = obj.find("description")
        self.assertEqual(key.line, 7)
        self.assertEqual(value, JsonString("Lamp"))
        self.assertIn("description", obj)
        self.assertIn(Key("description"), obj)
        self.assertIsNone(obj.find("model"))
        self.assertIsNone(obj.get("model"))

    def test_insertion_order(self) -> None:
        obj = JsonObject()
        for index, text in enumerate(["z", "a", "m"], start=1):
            obj.set(Key(text, index), JsonNumber(float(index)))
        self.assertEqual([key.text for key in obj], ["z", "a", "m"])
        self.assertEqual(len(obj), 3)

    def test_key_without_text_rejected(self) -> None:
        with self.assertRaises(ValueError):
            JsonObject().set(Key.null(), JsonNumber(1.0))


class TestAccessors(unittest.TestCase):
    def test_type_mismatch(self) -> None:
        with self.assertRaises(TypeMismatchError) as ctx:
            JsonString("x").as_object()
        self.assertEqual(ctx.exception.expected, "object")
        self.assertEqual(ctx.exception.actual, "string")

        with self.assertRaises(TypeMismatchError):
            JsonArray().as_string()
        with self.assertRaises(TypeMismatchError):
            JsonError("boom", 3).as_array()

    def test_error_value(self) -> None:
        error = JsonError("Unrecognized JSON element", 4)
        self.assertTrue(error.is_error)
        self.assertFalse(JsonNumber(1.0).is_error)
        self.assertEqual(str(error), "Unrecognized JSON element (line 4)")

    def test_to_python(self) -> None:
        obj = JsonObject()
        obj.set(Key("items", 1), JsonArray([JsonNumber(1.0), JsonString("two")]))
        self.assertEqual(obj.to_python(), {"items": [1.0, "two"]})


if __name__ == "__main__":
    unittest.main()
