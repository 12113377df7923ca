"""Tests for the horizontal tree layout."""
from __future__ import annotations

import pytest

from mindmapgen.layout import LEFT, RIGHT, LayoutMode, layout_tree, shape_tree, split_sides, subtree_heights
from mindmapgen.model import Node, Tree
from mindmapgen.parser import parse_outline

OUTLINE = (
    "Strategy\n"
    "  Market research and competitive analysis\n"
    "    Surveys\n"
    "    Interviews\n"
    "    Desk research\n"
    "  Product\n"
    "    MVP\n"
    "      Core flows\n"
    "      Onboarding\n"
    "    Pricing\n"
    "  Go to market\n"
)


def _laid_out(text: str, measurer, params, mode="right"):
    tree = Tree(parse_outline(text))
    shaped = shape_tree(tree, measurer, params)
    sides, bounds = layout_tree(tree, shaped, params, mode)
    return tree, shaped, sides, bounds


def test_root_at_origin(measurer, params) -> None:
    tree, _, _, _ = _laid_out(OUTLINE, measurer, params)
    assert (tree.root.x, tree.root.y) == (0.0, 0.0)


def test_right_layout_children_to_the_right(measurer, params) -> None:
    tree, shaped, sides, _ = _laid_out(OUTLINE, measurer, params)
    for i in tree.preorder():
        p = tree.parent[i]
        if p < 0:
            continue
        assert sides[i] == RIGHT
        node, parent = tree.nodes[i], tree.nodes[p]
        expected = parent.x + params.level_spacing + shaped[p].dims.width / 2 + shaped[i].dims.width / 2
        assert node.x == pytest.approx(expected)


def test_left_layout_mirrors_right(measurer, params) -> None:
    right, _, _, _ = _laid_out(OUTLINE, measurer, params, "right")
    left, _, sides, _ = _laid_out(OUTLINE, measurer, params, "left")
    for i in right.preorder():
        assert left.nodes[i].x == pytest.approx(-right.nodes[i].x)
        assert left.nodes[i].y == pytest.approx(right.nodes[i].y)
    assert all(s == LEFT for s in sides)


def test_both_splits_equal_children_two_and_two(measurer, params) -> None:
    tree, _, sides, _ = _laid_out("R\n  A\n  B\n  C\n  D\n", measurer, params, "both")
    kids = tree.children[0]
    right = [k for k in kids if sides[k] == RIGHT]
    left = [k for k in kids if sides[k] == LEFT]
    assert len(right) == 2 and len(left) == 2
    for k in right:
        assert tree.nodes[k].x > 0
    for k in left:
        assert tree.nodes[k].x < 0


def test_both_keeps_grandchildren_on_parent_side(measurer, params) -> None:
    tree, _, sides, _ = _laid_out(OUTLINE, measurer, params, "both")
    for i in tree.preorder():
        p = tree.parent[i]
        if p > 0:
            assert sides[i] == sides[p]


def test_sibling_subtrees_do_not_overlap(measurer, params) -> None:
    tree, shaped, sides, _ = _laid_out(OUTLINE, measurer, params, "both")
    heights = subtree_heights(tree, shaped, params.node_spacing)
    for i in tree.preorder():
        for side in (RIGHT, LEFT):
            group = sorted((k for k in tree.children[i] if sides[k] == side), key=lambda k: tree.nodes[k].y)
            for a, b in zip(group, group[1:]):
                bottom_a = tree.nodes[a].y + heights[a] / 2
                top_b = tree.nodes[b].y - heights[b] / 2
                assert top_b - bottom_a >= params.node_spacing - 1e-6


def test_children_centered_on_parent(measurer, params) -> None:
    tree, shaped, _, _ = _laid_out(OUTLINE, measurer, params)
    heights = subtree_heights(tree, shaped, params.node_spacing)
    kids = tree.children[0]
    top = tree.nodes[kids[0]].y - heights[kids[0]] / 2
    bottom = tree.nodes[kids[-1]].y + heights[kids[-1]] / 2
    assert (top + bottom) / 2 == pytest.approx(tree.root.y)


def test_childless_subtree_height_is_own_height(measurer, params) -> None:
    tree = Tree(parse_outline("R\n  leaf one\n  leaf two\n"))
    shaped = shape_tree(tree, measurer, params)
    heights = subtree_heights(tree, shaped, params.node_spacing)
    assert heights[1] == shaped[1].dims.height
    assert heights[0] == shaped[1].dims.height + shaped[2].dims.height + params.node_spacing


def test_single_node_bounds(measurer, params) -> None:
    tree = Tree(Node("Only"))
    shaped = shape_tree(tree, measurer, params)
    _, bounds = layout_tree(tree, shaped, params)
    assert bounds.width == shaped[0].dims.width
    assert bounds.height == shaped[0].dims.height
    assert not bounds.is_empty


def test_bounds_cover_every_box(measurer, params) -> None:
    tree, shaped, _, bounds = _laid_out(OUTLINE, measurer, params, "both")
    for i, node in enumerate(tree.nodes):
        d = shaped[i].dims
        assert bounds.min_x <= node.x - d.width / 2
        assert bounds.max_x >= node.x + d.width / 2
        assert bounds.min_y <= node.y - d.height / 2
        assert bounds.max_y >= node.y + d.height / 2


def test_split_sides_ties_go_right() -> None:
    assert split_sides([1, 2, 3], [0.0, 10.0, 10.0, 10.0]) == ([1, 3], [2])
    assert split_sides([1, 2, 3], [0.0, 50.0, 10.0, 10.0]) == ([1], [2, 3])


@pytest.mark.parametrize(
    "value, expected",
    [
        ("right", LayoutMode.RIGHT),
        ("LEFT", LayoutMode.LEFT),
        (" both ", LayoutMode.BOTH),
        ("diagonal", LayoutMode.RIGHT),
        (None, LayoutMode.RIGHT),
        (LayoutMode.BOTH, LayoutMode.BOTH),
    ],
)
def test_layout_mode_parse(value, expected) -> None:
    assert LayoutMode.parse(value) is expected
