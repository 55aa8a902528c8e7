"""Key layout invariants and index/key lookups."""

from __future__ import annotations

import unittest

from sparseclone.errors import ConfigurationError
from sparseclone.keymap import (
    LAYOUT_KEYS,
    RESERVED_KEYS,
    KeyMap,
    Layout,
    available_layout_names,
    parse_layout,
)


class LayoutInvariantTests(unittest.TestCase):
    def test_every_layout_has_distinct_keys_outside_reserved_actions(self) -> None:
        for layout, keys in LAYOUT_KEYS.items():
            with self.subTest(layout=layout.value):
                self.assertEqual(len(set(keys)), len(keys))
                self.assertFalse(set(keys) & RESERVED_KEYS)
                self.assertTrue(all(len(key) == 1 for key in keys))

    def test_layout_lengths(self) -> None:
        self.assertEqual(len(LAYOUT_KEYS[Layout.QWERTY]), 30)
        self.assertEqual(len(LAYOUT_KEYS[Layout.COLEMAK]), 30)
        self.assertEqual(len(LAYOUT_KEYS[Layout.COLEMAK_DH]), 30)
        self.assertEqual(len(LAYOUT_KEYS[Layout.COLEMAK_DH_ISO]), 29)
        self.assertEqual(len(LAYOUT_KEYS[Layout.DVORAK]), 30)

    def test_qwerty_starts_on_home_row(self) -> None:
        self.assertEqual(LAYOUT_KEYS[Layout.QWERTY][:10], tuple("asdfghjkl;"))
        self.assertEqual(LAYOUT_KEYS[Layout.QWERTY][10], "q")

    def test_every_layout_builds_a_keymap(self) -> None:
        for name in available_layout_names():
            with self.subTest(layout=name):
                keymap = KeyMap.for_layout(name)
                self.assertEqual(keymap.layout.value, name)


class KeyMapConstructionTests(unittest.TestCase):
    def test_reserved_key_is_a_configuration_error(self) -> None:
        for reserved in ("0", "8", "9"):
            with self.subTest(key=reserved):
                with self.assertRaises(ConfigurationError):
                    KeyMap(["a", reserved, "b"])

    def test_duplicate_keys_are_a_configuration_error(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            KeyMap(["a", "s", "a"])
        self.assertIn("a", str(ctx.exception))

    def test_empty_or_multi_character_keys_are_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            KeyMap([])
        with self.assertRaises(ConfigurationError):
            KeyMap(["ab"])

    def test_parse_layout_accepts_case_and_whitespace(self) -> None:
        self.assertIs(parse_layout(" Colemak-DH "), Layout.COLEMAK_DH)

    def test_parse_layout_rejects_unknown_name(self) -> None:
        with self.assertRaises(ConfigurationError):
            parse_layout("azerty")


class KeyMapLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.keymap = KeyMap.for_layout(Layout.QWERTY)

    def test_assign_follows_ergonomic_order(self) -> None:
        self.assertEqual(self.keymap.assign(0), "a")
        self.assertEqual(self.keymap.assign(1), "s")
        self.assertEqual(self.keymap.assign(29), "/")

    def test_assign_out_of_range_is_index_error(self) -> None:
        with self.assertRaises(IndexError):
            self.keymap.assign(30)
        with self.assertRaises(IndexError):
            self.keymap.assign(-1)

    def test_reverse_lookup_is_inverse_of_assign(self) -> None:
        for index in range(len(self.keymap)):
            self.assertEqual(self.keymap.reverse_lookup(self.keymap.assign(index)), index)

    def test_reverse_lookup_of_unmapped_key_is_none(self) -> None:
        self.assertIsNone(self.keymap.reverse_lookup("0"))
        self.assertIsNone(self.keymap.reverse_lookup("A"))


if __name__ == "__main__":
    unittest.main()
