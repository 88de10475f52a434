"""
Tree Walker Tests
=================

Run:
    python -m pytest tests/test_walk.py
"""

import unittest

from lenta_scraper.extract.walk import walk, iter_objects


def build_tree(depth, fanout):
    """Synthetic document: every object holds `fanout` child objects in a list
    plus one scalar field. Returns (tree, object_count)."""
    if depth == 0:
        return {"leaf": True}, 1
    children = []
    count = 1
    for _ in range(fanout):
        child, child_count = build_tree(depth - 1, fanout)
        children.append(child)
        count += child_count
    return {"children": children, "label": "node", "n": depth}, count


class TestWalk(unittest.TestCase):

    def test_visits_every_object_once(self):
        tree, expected = build_tree(depth=4, fanout=3)
        visited = []
        walk(tree, visited.append)
        self.assertEqual(len(visited), expected)
        self.assertEqual(len({id(obj) for obj in visited}), expected)

    def test_top_level_array(self):
        doc = [{"a": 1}, [{"b": 2}, [{"c": {"d": 4}}]], "x", 5, None]
        visited = []
        walk(doc, visited.append)
        self.assertEqual(len(visited), 4)

    def test_scalars_are_leaves(self):
        for value in ("text", 1, 1.5, True, None):
            visited = []
            walk(value, visited.append)
            self.assertEqual(visited, [])

    def test_empty_containers(self):
        visited = []
        walk({"a": [], "b": {}}, visited.append)
        # the root and the empty object
        self.assertEqual(len(visited), 2)

    def test_parent_before_children(self):
        doc = {"name": "root", "child": {"name": "child", "grand": {"name": "grand"}}}
        names = [obj["name"] for obj in iter_objects(doc)]
        self.assertEqual(names, ["root", "child", "grand"])

    def test_visit_receives_mapping(self):
        doc = {"items": [{"title": "Milk"}]}
        seen = []
        walk(doc, lambda obj: seen.append(obj.get("title")))
        self.assertEqual(seen, [None, "Milk"])

    def test_deep_nesting_beyond_recursion_limit(self):
        doc = {"name": "bottom"}
        for _ in range(5000):
            doc = {"wrap": [doc]}
        objects = list(iter_objects(doc))
        self.assertEqual(len(objects), 5001)
        self.assertEqual(objects[-1], {"name": "bottom"})

    def test_sibling_order_is_document_order(self):
        doc = [{"n": 1, "kids": [{"n": 2}, {"n": 3}]}, {"n": 4}]
        self.assertEqual([obj["n"] for obj in iter_objects(doc)], [1, 2, 3, 4])


if __name__ == "__main__":
    unittest.main()
