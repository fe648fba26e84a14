import os
import unittest
from unittest.mock import patch
import importlib

from _test_utils import add_src_to_path

add_src_to_path()

env_utils = importlib.import_module("src.core.env_utils")


class TestEnvUtils(unittest.TestCase):
    def test_parse_bool(self) -> None:
        self.assertTrue(env_utils.parse_bool(" On "))
        self.assertFalse(env_utils.parse_bool("off", default=True))
        self.assertTrue(env_utils.parse_bool(None, default=True))

    def test_env_bool_defaults_and_values(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            self.assertTrue(env_utils.env_bool("X", True))
            self.assertFalse(env_utils.env_bool("X"))
        with patch.dict(os.environ, {"X": " yes "}, clear=True):
            self.assertTrue(env_utils.env_bool("X", False))
        with patch.dict(os.environ, {"X": "no"}, clear=True):
            self.assertFalse(env_utils.env_bool("X", True))

    def test_env_int_minimum(self) -> None:
        with patch.dict(os.environ, {"X": "0"}, clear=True):
            self.assertEqual(env_utils.env_int("X", 5, minimum=1), 1)
        with patch.dict(os.environ, {"X": " 10 "}, clear=True):
            self.assertEqual(env_utils.env_int("X", 5, minimum=1), 10)
        with patch.dict(os.environ, {"X": "bad"}, clear=True):
            self.assertEqual(env_utils.env_int("X", 3, minimum=5), 5)
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(env_utils.env_int("X", 3), 3)

    def test_env_positive_int(self) -> None:
        with patch.dict(os.environ, {"X": "0"}, clear=True):
            self.assertEqual(env_utils.env_positive_int("X", 7), 7)
        with patch.dict(os.environ, {"X": "-2"}, clear=True):
            self.assertEqual(env_utils.env_positive_int("X", 7), 7)
        with patch.dict(os.environ, {"X": "2"}, clear=True):
            self.assertEqual(env_utils.env_positive_int("X", 7), 2)

    def test_env_positive_float(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(env_utils.env_positive_float("X"))
        for raw in ("nope", "0", "-3", "  "):
            with patch.dict(os.environ, {"X": raw}, clear=True):
                self.assertIsNone(env_utils.env_positive_float("X"))
        with patch.dict(os.environ, {"X": "12.5"}, clear=True):
            self.assertEqual(env_utils.env_positive_float("X"), 12.5)

    def test_env_str_blank_falls_back(self) -> None:
        with patch.dict(os.environ, {"X": "   "}, clear=True):
            self.assertEqual(env_utils.env_str("X", "default"), "default")
        with patch.dict(os.environ, {"X": " news "}, clear=True):
            self.assertEqual(env_utils.env_str("X", "default"), "news")
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(env_utils.env_str("X", "default"), "default")
