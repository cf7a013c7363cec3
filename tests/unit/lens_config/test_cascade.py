"""Tests for deep-merge semantics and ancestor chains."""

from __future__ import annotations

import unittest

from studylenses.lens_config import ancestor_chain, deep_merge, merge_layers


class AncestorChainTests(unittest.TestCase):
    def test_chain_is_root_first_and_excludes_the_file(self) -> None:
        self.assertEqual(ancestor_chain("/a/b/c.js"), ["/", "/a", "/a/b"])
        self.assertEqual(ancestor_chain("a/b/c.js"), ["/", "/a", "/a/b"])

    def test_top_level_file_has_only_root(self) -> None:
        self.assertEqual(ancestor_chain("/c.js"), ["/"])


class DeepMergeTests(unittest.TestCase):
    def test_sibling_keys_survive(self) -> None:
        self.assertEqual(deep_merge({"a": 1, "b": 2}, {"b": 3}), {"a": 1, "b": 3})

    def test_nested_objects_merge_key_by_key(self) -> None:
        base = {"embed": {"template": "x", "features": {"copy": True}}}
        override = {"embed": {"features": {"paste": True}}}

        merged = deep_merge(base, override)

        self.assertEqual(merged, {"embed": {"template": "x", "features": {"copy": True, "paste": True}}})

    def test_arrays_scalars_and_null_replace(self) -> None:
        base = {"ranges": [1, 2, 3], "depth": {"max": 4}, "style": "dark"}
        override = {"ranges": [9], "depth": None, "style": {"name": "light"}}

        merged = deep_merge(base, override)

        self.assertEqual(merged, {"ranges": [9], "depth": None, "style": {"name": "light"}})

    def test_inputs_are_not_mutated_or_aliased(self) -> None:
        base = {"embed": {"features": {"copy": True}}, "list": [1]}
        override = {"embed": {"features": {"paste": True}}}

        merged = deep_merge(base, override)
        merged["embed"]["features"]["copy"] = False  # type: ignore[index]
        merged["list"].append(2)  # type: ignore[union-attr]

        self.assertEqual(base, {"embed": {"features": {"copy": True}}, "list": [1]})
        self.assertEqual(override, {"embed": {"features": {"paste": True}}})

    def test_merge_layers_deepest_wins(self) -> None:
        layers = [{"lines": {"numbers": "root"}}, {"lines": {"numbers": "mid"}}, {"lines": {"numbers": "leaf"}}]
        self.assertEqual(merge_layers(layers), {"lines": {"numbers": "leaf"}})
        self.assertEqual(merge_layers([]), {})


if __name__ == "__main__":
    unittest.main()
