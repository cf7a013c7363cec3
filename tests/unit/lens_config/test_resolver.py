"""Tests for resolving effective lens configuration from ancestor layers.

Uses the nested-config fixture: root, ``/frontend`` and
``/frontend/components`` each carry a ``lenses.json``; ``/docs`` has a broken
one and ``/frontend/utils`` has none.
"""

from __future__ import annotations

import json
import unittest
from pathlib import Path

from studylenses.file_tree_model import DirectoryNode, FileNode, annotate_tree, find_node, load_snapshot
from studylenses.lens_config import (
    LAYER_INVALID,
    LAYER_MISSING,
    LAYER_OK,
    load_layer,
    resolve_config,
    resolve_config_layers,
)

FIXTURE = Path(__file__).resolve().parents[2] / "fixtures" / "nested_configs.json"


def _config_file(path: str, data: object) -> FileNode:
    dir_path = path.rsplit("/", 1)[0].strip("/")
    return FileNode(
        name="lenses.json",
        path=path,
        dir=dir_path,
        ext=".json",
        base="lenses",
        content=data if isinstance(data, str) else json.dumps(data),
    )


def _scenario_tree() -> DirectoryNode:
    components = DirectoryNode(name="components", path="/frontend/components", dir="frontend")
    components.children = [
        FileNode(name="Button.jsx", path="/frontend/components/Button.jsx", dir="frontend/components", ext=".jsx"),
        _config_file("/frontend/components/lenses.json", {"lenses": {"embed": {"features": {"copy": True}}}}),
    ]
    frontend = DirectoryNode(name="frontend", path="/frontend", dir="")
    frontend.children = [
        components,
        _config_file("/frontend/lenses.json", {"lenses": {"embed": {"features": {"interactive": True}}}}),
    ]
    root = DirectoryNode(name="root", path="/")
    root.children = [frontend, _config_file("/lenses.json", {"lenses": {"embed": {"template": "base"}}})]
    annotate_tree(root)
    return root


class ResolveConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tree = load_snapshot(FIXTURE)

    def test_three_level_cascade_merges_nested_features(self) -> None:
        config = resolve_config("/frontend/components/Button.jsx", _scenario_tree())

        self.assertEqual(
            config,
            {"lenses": {"embed": {"template": "base", "features": {"interactive": True, "copy": True}}}},
        )

    def test_deepest_layer_wins_and_siblings_survive(self) -> None:
        config = resolve_config("/frontend/components/Button.jsx", self.tree)
        lenses = config["lenses"]

        self.assertEqual(lenses["embed"], {"template": "base", "features": {"copy": True, "interactive": True}})
        self.assertEqual(lenses["ast"], {"expandDepth": 3, "highlight": {"style": "react"}})
        self.assertEqual(lenses["lines"], {"numbers": True, "ranges": [1, 2]})

    def test_directory_without_config_does_not_break_chain(self) -> None:
        config = resolve_config("/frontend/utils/helpers.js", self.tree)

        self.assertEqual(config["lenses"]["embed"], {"template": "base", "features": {"copy": False, "interactive": True}})
        self.assertEqual(config["lenses"]["ast"]["expandDepth"], 3)

    def test_null_replaces_ancestor_object(self) -> None:
        config = resolve_config("/backend/api/server.js", self.tree)

        self.assertEqual(config["lenses"]["embed"], {"template": "api", "features": None})
        self.assertEqual(config["lenses"]["lines"], {"numbers": False, "ranges": [1, 2]})

    def test_malformed_layer_is_skipped(self) -> None:
        with self.assertLogs("studylenses.lens_config.resolver", level="WARNING") as logs:
            config = resolve_config("/docs/README.md", self.tree)

        self.assertEqual(config["lenses"]["embed"], {"template": "base", "features": {"copy": False}})
        self.assertIn("/docs/lenses.json", "\n".join(logs.output))

    def test_layers_report_status_per_directory(self) -> None:
        statuses = [(layer.path, layer.status) for layer in resolve_config_layers("/docs/README.md", self.tree)]
        self.assertEqual(statuses, [("/", LAYER_OK), ("/docs", LAYER_INVALID)])

        helper_statuses = [layer.status for layer in resolve_config_layers("/frontend/utils/helpers.js", self.tree)]
        self.assertEqual(helper_statuses, [LAYER_OK, LAYER_OK, LAYER_MISSING])

    def test_non_object_config_counts_as_invalid(self) -> None:
        root = DirectoryNode(name="root", path="/")
        root.children = [_config_file("/lenses.json", "[1, 2]"), FileNode(name="a.py", path="/a.py")]

        self.assertEqual(load_layer(root, "/").status, LAYER_INVALID)
        self.assertEqual(resolve_config("/a.py", root), {})

    def test_empty_or_absent_tree_yields_empty_config(self) -> None:
        self.assertEqual(resolve_config("/nowhere/file.py", self.tree)["lenses"]["embed"]["template"], "base")
        self.assertEqual(resolve_config("/a.py", None), {})
        self.assertEqual(resolve_config("/a.py", DirectoryNode(name="empty", path="/")), {})

    def test_resolution_does_not_mutate_layers(self) -> None:
        first = resolve_config("/frontend/components/Button.jsx", self.tree)
        first["lenses"]["embed"]["template"] = "changed"

        again = resolve_config("/frontend/components/Button.jsx", self.tree)
        self.assertEqual(again["lenses"]["embed"]["template"], "base")


class ConfigRecomputationTests(unittest.TestCase):
    def test_in_place_edit_of_lenses_json_is_seen_by_next_resolve(self) -> None:
        tree = load_snapshot(FIXTURE)
        self.assertEqual(resolve_config("/frontend/utils/helpers.js", tree)["lenses"]["embed"]["template"], "base")

        root_config = find_node(tree, "/lenses.json")
        assert root_config is not None
        root_config.content = json.dumps({"lenses": {"embed": {"template": "edited"}}})

        self.assertEqual(resolve_config("/frontend/utils/helpers.js", tree)["lenses"]["embed"]["template"], "edited")


if __name__ == "__main__":
    unittest.main()
