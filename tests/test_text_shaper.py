"""Tests for label measuring and wrapping."""
from __future__ import annotations

import pytest

from mindmapgen.layout import TextMeasurer, break_lines, shape_label, shape_tree, split_cjk_runs, split_words
from mindmapgen.model import Node, NodeKind, Tree
from mindmapgen.parser import parse_outline


def test_split_words_latin_and_cjk() -> None:
    words = split_words("Hello world 中文")
    assert [w.text for w in words] == ["Hello", "world", "中", "文"]
    assert [w.spaced for w in words] == [False, True, True, False]


def test_short_label_uses_min_width(measurer, params) -> None:
    dims = shape_label("Hi", measurer, params)
    assert dims.width == params.min_node_width
    assert dims.height == params.line_height + 2 * params.text_padding
    assert dims.lines == ["Hi"]
    assert dims.text_width == 30


def test_empty_label(measurer, params) -> None:
    dims = shape_label("   ", measurer, params)
    assert dims.lines == []
    assert dims.width == params.min_node_width
    assert dims.height == params.min_node_height


def test_width_grows_with_text(measurer, params) -> None:
    # 7 chars * 15 = 105, plus 2 * 15 padding
    dims = shape_label("Roadmap", measurer, params)
    assert dims.width == 135
    assert dims.lines == ["Roadmap"]


def test_long_latin_label_wraps_at_spaces(measurer, params) -> None:
    text = "the quick brown fox jumps over the lazy dog again"
    dims = shape_label(text, measurer, params)
    assert dims.width == params.max_node_width
    assert len(dims.lines) > 1
    assert " ".join(dims.lines) == text
    available = params.max_node_width - 2 * params.text_padding
    assert all(measurer.width(line) <= available for line in dims.lines)
    assert dims.height == len(dims.lines) * params.line_height + 2 * params.text_padding


def test_thirty_cjk_characters_wrap_to_three_lines(measurer, params) -> None:
    text = "我们需要一个能够自动生成思维导图的工具来帮助大家整理复杂的想法"[:30]
    assert len(text) == 30
    dims = shape_label(text, measurer, params)
    assert len(dims.lines) >= 3
    assert "".join(dims.lines) == text


@pytest.mark.parametrize(
    "text",
    ["x", "A fairly ordinary label", "supercalifragilisticexpialidocious" * 3, "混合 mixed 文本" * 5],
)
def test_width_stays_within_bounds(measurer, params, text: str) -> None:
    dims = shape_label(text, measurer, params)
    assert params.min_node_width <= dims.width <= params.max_node_width
    assert dims.height >= params.min_node_height


def test_overlong_word_is_split(measurer, params) -> None:
    word = "x" * 40
    dims = shape_label(word, measurer, params)
    assert "".join(dims.lines) == word
    assert len(dims.lines) == 3  # 14 + 14 + 12 chars at 15px in 210px


def test_break_lines_greedy(measurer) -> None:
    lines = break_lines(split_words("aa bb cc dd"), measurer, available=5 * 15)
    assert lines == ["aa bb", "cc dd"]


def test_split_cjk_runs_only_for_long_runs() -> None:
    short = "中" * 20
    assert split_cjk_runs(short) == [short]
    long = "中" * 25
    assert split_cjk_runs(long) == ["中" * 10, "中" * 10, "中" * 5]


def test_measurer_memoizes(fixed_font) -> None:
    measurer = TextMeasurer(fixed_font)
    assert measurer.width("abc") == 45
    assert measurer.width("abc") == 45
    assert fixed_font.calls == 1
    assert measurer.cache_size == 1


def test_shape_tree_kinds(measurer, params) -> None:
    tree = Tree(parse_outline("R\n  A\n    A1\n      A1x\n  B\n    B1\n  C\n"))
    shaped = shape_tree(tree, measurer, params)
    kinds = {tree.nodes[i].text: s.kind for i, s in enumerate(shaped)}
    assert kinds == {
        "R": NodeKind.ROOT,
        "A": NodeKind.BRANCH,
        "A1": NodeKind.LEAF_PARENT,
        "A1x": NodeKind.LEAF,
        "B": NodeKind.LEAF_PARENT,
        "B1": NodeKind.LEAF,
        "C": NodeKind.LEAF,
    }


def test_childless_root_is_root_kind(measurer, params) -> None:
    shaped = shape_tree(Tree(Node("Solo")), measurer, params)
    assert shaped[0].kind is NodeKind.ROOT
