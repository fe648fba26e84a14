import unittest
import importlib

from _test_utils import add_src_to_path

add_src_to_path()

number_utils = importlib.import_module("src.core.number_utils")


class TestNumberUtils(unittest.TestCase):
    def test_coerce_int_values(self) -> None:
        self.assertEqual(number_utils.coerce_int("42"), 42)
        self.assertEqual(number_utils.coerce_int(" -3 "), -3)
        self.assertEqual(number_utils.coerce_int(7), 7)

    def test_coerce_int_rejects_non_numeric(self) -> None:
        self.assertIsNone(number_utils.coerce_int(None))
        self.assertIsNone(number_utils.coerce_int(""))
        self.assertIsNone(number_utils.coerce_int("abc"))
        self.assertIsNone(number_utils.coerce_int("1.5"))
        self.assertIsNone(number_utils.coerce_int(True))

    def test_coerce_bounded_int(self) -> None:
        self.assertEqual(number_utils.coerce_bounded_int("12", 1, 12), 12)
        self.assertIsNone(number_utils.coerce_bounded_int("13", 1, 12))
        self.assertIsNone(number_utils.coerce_bounded_int("0", 1, 12))
        self.assertIsNone(number_utils.coerce_bounded_int("x", 1, 12))
