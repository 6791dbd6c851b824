from __future__ import annotations

import unittest

from schoolphotos.utils.axtree import ax_tree_from_cdp, find_ax_node, is_media_preview


def _node(name: str, *children: dict, role: str = "generic") -> dict:
    node = {"role": role, "name": name}
    if children:
        node["children"] = list(children)
    return node


class TestFindAxNode(unittest.TestCase):
    def test_returns_first_match_in_pre_order(self) -> None:
        tree = _node(
            "root",
            _node("a", _node("a1"), _node("target-deep")),
            _node("target-shallow-but-later"),
        )

        found = find_ax_node(tree, lambda n: n["name"].startswith("target"))

        self.assertIsNotNone(found)
        assert found is not None
        self.assertEqual(found["name"], "target-deep")

    def test_parent_is_visited_before_its_children(self) -> None:
        tree = _node("root", _node("match", _node("match")))
        found = find_ax_node(tree, lambda n: n["name"] == "match")
        self.assertIs(found, tree["children"][0])

    def test_root_can_match(self) -> None:
        tree = _node("root", _node("child"))
        self.assertIs(find_ax_node(tree, lambda n: True), tree)

    def test_empty_tree_and_no_match_return_none(self) -> None:
        self.assertIsNone(find_ax_node(None, lambda n: True))
        self.assertIsNone(find_ax_node({}, lambda n: True))
        tree = _node("root", _node("a"), _node("b"))
        self.assertIsNone(find_ax_node(tree, lambda n: n["name"] == "zzz"))

    def test_handles_very_deep_trees(self) -> None:
        tree = leaf = _node("leaf", role="button")
        for i in range(5000):
            tree = _node(f"level-{i}", tree)

        self.assertIs(find_ax_node(tree, lambda n: n["role"] == "button"), leaf)


class TestIsMediaPreview(unittest.TestCase):
    def test_buttons_named_after_media_files(self) -> None:
        self.assertTrue(is_media_preview({"role": "button", "name": "IMG_2031.jpg"}))
        self.assertTrue(is_media_preview({"role": "button", "name": "Zwemles.MOV"}))
        self.assertTrue(is_media_preview({"role": "button", "name": "clip.mp4 (12 MB)"}))
        self.assertTrue(is_media_preview({"role": "button", "name": "scan.png"}))

    def test_rejects_other_roles_and_names(self) -> None:
        self.assertFalse(is_media_preview({"role": "img", "name": "IMG_2031.jpg"}))
        self.assertFalse(is_media_preview({"role": "button", "name": "Reageren"}))
        self.assertFalse(is_media_preview({"role": "button", "name": "verslag.pdf"}))
        self.assertFalse(is_media_preview({"role": "button"}))


def _cdp(node_id: str, role: str, name: str = "", *, parent: str = "", children: tuple = (), ignored: bool = False) -> dict:
    node = {
        "nodeId": node_id,
        "ignored": ignored,
        "role": {"type": "role", "value": role},
        "name": {"type": "computedString", "value": name},
        "childIds": list(children),
    }
    if parent:
        node["parentId"] = parent
    return node


class TestAxTreeFromCdp(unittest.TestCase):
    def test_nests_nodes_in_child_order(self) -> None:
        nodes = [
            _cdp("3", "button", "b.jpg", parent="1"),
            _cdp("1", "RootWebArea", "Post", children=("2", "3")),
            _cdp("2", "button", "a.jpg", parent="1"),
        ]

        tree = ax_tree_from_cdp(nodes)

        self.assertEqual(tree, {
            "role": "RootWebArea",
            "name": "Post",
            "children": [{"role": "button", "name": "a.jpg"}, {"role": "button", "name": "b.jpg"}],
        })

    def test_ignored_nodes_hand_their_children_to_the_parent(self) -> None:
        nodes = [
            _cdp("1", "RootWebArea", "Post", children=("2", "5")),
            _cdp("2", "generic", parent="1", children=("3", "4"), ignored=True),
            _cdp("3", "heading", "Groep 4", parent="2"),
            _cdp("4", "button", "IMG_1.jpg", parent="2"),
            _cdp("5", "button", "Reageren", parent="1"),
        ]

        tree = ax_tree_from_cdp(nodes)

        assert tree is not None
        self.assertEqual([c["name"] for c in tree["children"]], ["Groep 4", "IMG_1.jpg", "Reageren"])
        self.assertEqual(find_ax_node(tree, is_media_preview)["name"], "IMG_1.jpg")

    def test_empty_or_fully_ignored_dump_is_none(self) -> None:
        self.assertIsNone(ax_tree_from_cdp([]))
        self.assertIsNone(ax_tree_from_cdp([_cdp("1", "generic", ignored=True)]))

    def test_ignored_root_with_several_children_keeps_them_all(self) -> None:
        nodes = [
            _cdp("1", "generic", children=("2", "3"), ignored=True),
            _cdp("2", "banner", "Menu", parent="1"),
            _cdp("3", "main", "", parent="1"),
        ]

        tree = ax_tree_from_cdp(nodes)

        assert tree is not None
        self.assertEqual([c["role"] for c in tree["children"]], ["banner", "main"])

if __name__ == "__main__":
    unittest.main()
