import math
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from statblocks.application.services.value_normalizer import (
    append_values,
    flatten,
    join_image,
    js_string,
    js_truthy,
    to_boolean,
    to_number,
)


class ToNumberTests(unittest.TestCase):
    def test_parses_numbers_and_numeric_strings(self) -> None:
        self.assertEqual(5, to_number(5))
        self.assertEqual(5, to_number("5"))
        self.assertEqual(-3, to_number(" -3 "))
        self.assertEqual(2.5, to_number("2.5"))
        self.assertIsInstance(to_number("4.0"), int)

    def test_absent_values_return_none(self) -> None:
        for value in (None, "", "   ", "abc", "5 feet", float("nan"), math.inf, [], {}):
            self.assertIsNone(to_number(value), value)

    def test_underscore_separated_digits_are_not_numbers(self) -> None:
        self.assertIsNone(to_number("1_000"))
        self.assertIsNone(to_number("2_5.0"))

    def test_booleans_count_as_one_and_zero(self) -> None:
        self.assertEqual(1, to_number(True))
        self.assertEqual(0, to_number(False))


class ToBooleanTests(unittest.TestCase):
    def test_none_uses_fallback(self) -> None:
        self.assertTrue(to_boolean(None, True))
        self.assertFalse(to_boolean(None, False))

    def test_booleans_pass_through(self) -> None:
        self.assertFalse(to_boolean(False, True))
        self.assertTrue(to_boolean(True, False))

    def test_known_strings_are_case_insensitive(self) -> None:
        for text in ("true", "YES", " 1 "):
            self.assertTrue(to_boolean(text, False), text)
        for text in ("False", "no", "0"):
            self.assertFalse(to_boolean(text, True), text)

    def test_other_values_use_truthiness(self) -> None:
        self.assertTrue(to_boolean("maybe", False))
        self.assertFalse(to_boolean("", True))
        self.assertFalse(to_boolean(0, True))
        self.assertTrue(to_boolean(2, False))
        self.assertTrue(to_boolean([], False))

    def test_js_truthy_treats_containers_as_true(self) -> None:
        self.assertTrue(js_truthy({}))
        self.assertFalse(js_truthy(float("nan")))
        self.assertFalse(js_truthy(None))


class AppendAndFlattenTests(unittest.TestCase):
    def test_append_concatenates_lists_and_strings(self) -> None:
        self.assertEqual([1, 2, 3], append_values([1], [2, 3]))
        self.assertEqual("darkvision 60 ft.tremorsense", append_values("darkvision 60 ft.", "tremorsense"))

    def test_append_wraps_scalar_operands(self) -> None:
        self.assertEqual(["a", "b"], append_values(["a"], "b"))
        self.assertEqual(["a", "b"], append_values("a", ["b"]))
        self.assertEqual([30, "fly 60"], append_values(30, "fly 60"))

    def test_append_does_not_mutate_inputs(self) -> None:
        existing = ["a"]
        append_values(existing, ["b"])
        self.assertEqual(["a"], existing)

    def test_flatten_respects_depth(self) -> None:
        self.assertEqual(["a", "b", "c", ["d"]], flatten(["a", ["b", ["c", ["d"]]]], 2))
        self.assertEqual(["a", "b", "c", "d"], flatten(["a", ["b", ["c", ["d"]]]]))

    def test_join_image_flattens_two_levels(self) -> None:
        self.assertEqual("a.pngb.png", join_image(["a.png", ["b.png"]]))
        self.assertEqual("solo.png", join_image("solo.png"))

    def test_js_string_formats_like_the_record_source(self) -> None:
        self.assertEqual("", js_string(None))
        self.assertEqual("true", js_string(True))
        self.assertEqual("3", js_string(3.0))
        self.assertEqual("a,b", js_string(["a", "b"]))


if __name__ == "__main__":
    unittest.main()
