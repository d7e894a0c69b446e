"""Tests for the arena title tree and the merge-aware tree builder."""

from __future__ import annotations

from typing import Any

import pytest

from ingestkit_sheets.errors import (
    DuplicateTitleError,
    NoColumnsDefinedError,
    NoFieldsDefinedError,
    SheetErrorCode,
)
from ingestkit_sheets.grid import CellGrid
from ingestkit_sheets.models import MergeRange
from ingestkit_sheets.titles import ROOT_TITLE_NAME, TitleTree, TitleTreeBuilder


def _merge(from_row: int, to_row: int, from_column: int, to_column: int) -> MergeRange:
    return MergeRange(from_row=from_row, to_row=to_row, from_column=from_column, to_column=to_column)


def _build(rows: list[list[Any]], merges: list[MergeRange] | None = None) -> tuple[TitleTree, int]:
    return TitleTreeBuilder(CellGrid.from_values(rows), merges or []).build()


def _shape(tree: TitleTree, node_id: int = TitleTree.root_id) -> list[tuple[str, int, int, list]]:
    return [
        (c.name, c.from_column, c.to_column, _shape(tree, c.id))
        for c in tree.children(node_id)
    ]


class TestTitleTree:
    def test_root(self) -> None:
        tree = TitleTree(1, 4)
        assert tree.root.name == ROOT_TITLE_NAME
        assert (tree.root.from_column, tree.root.to_column) == (1, 4)
        assert tree.root.is_leaf

    def test_add_and_lookup(self) -> None:
        tree = TitleTree(1, 4)
        node_id = tree.add_child(tree.root_id, "hp", 2, 2)
        assert tree.child(tree.root_id, "hp") is tree.node(node_id)
        assert tree.child(tree.root_id, "mp") is None
        assert tree.node(node_id).parent == tree.root_id

    def test_same_name_same_range_is_idempotent(self) -> None:
        tree = TitleTree(1, 4)
        first = tree.add_child(tree.root_id, "hp", 2, 3)
        second = tree.add_child(tree.root_id, "hp", 2, 3)
        assert first == second
        assert len(tree.root.children) == 1

    def test_same_name_other_range_fails(self) -> None:
        tree = TitleTree(1, 4)
        tree.add_child(tree.root_id, "hp", 2, 2)
        with pytest.raises(DuplicateTitleError) as info:
            tree.add_child(tree.root_id, "hp", 3, 3)
        assert info.value.code is SheetErrorCode.E_TITLE_DUPLICATE
        assert info.value.field_name == "hp"

    def test_same_name_under_different_parents(self) -> None:
        tree = TitleTree(1, 4)
        a = tree.add_child(tree.root_id, "a", 1, 2)
        b = tree.add_child(tree.root_id, "b", 3, 4)
        tree.add_child(a, "x", 1, 1)
        tree.add_child(b, "x", 3, 3)
        assert tree.child(a, "x").from_column == 1
        assert tree.child(b, "x").from_column == 3

    def test_sort_children(self) -> None:
        tree = TitleTree(1, 4)
        tree.add_child(tree.root_id, "late", 4, 4)
        tree.add_child(tree.root_id, "early", 1, 2)
        tree.sort_children()
        assert [c.name for c in tree.children(tree.root_id)] == ["early", "late"]

    def test_walk_and_to_dict(self) -> None:
        tree = TitleTree(1, 3)
        pos = tree.add_child(tree.root_id, "pos", 1, 2)
        tree.add_child(pos, "x", 1, 1)
        assert [(d, n.name) for d, n in tree.walk()] == [(0, "pos"), (1, "x")]
        assert tree.to_dict()["children"][0]["children"][0] == {
            "name": "x", "from_column": 1, "to_column": 1, "children": []
        }


class TestFlatHeaders:
    def test_leaves_skip_tag_column(self) -> None:
        tree, band = _build([["#", "id", "name"], ["##type", "int", "string"]])
        assert band == 1
        assert _shape(tree) == [("id", 1, 1, []), ("name", 2, 2, [])]
        assert (tree.root.from_column, tree.root.to_column) == (1, 2)

    def test_blank_header_columns_skipped(self) -> None:
        tree, _ = _build([["#", "id", None, "  ", "name"]])
        assert [c.name for c in tree.children(tree.root_id)] == ["id", "name"]

    def test_names_are_stripped(self) -> None:
        tree, _ = _build([["#", " id "]])
        assert tree.child(tree.root_id, "id") is not None

    def test_duplicate_flat_header_fails(self) -> None:
        with pytest.raises(DuplicateTitleError) as info:
            _build([["#", "id", "id"]])
        assert info.value.column == 2
        assert info.value.row == 1

    def test_root_spans_longest_row(self) -> None:
        tree, _ = _build([["#", "id"], [None, 1, 2, 3]])
        assert tree.root.to_column == 3


class TestMergedHeaders:
    def test_pos_with_sub_headers(self) -> None:
        rows = [
            ["##var", "id", "pos", None, "name"],
            [None, None, "x", "y", None],
        ]
        tree, band = _build(rows, [_merge(1, 2, 0, 0), _merge(1, 1, 2, 3)])
        assert band == 2
        assert _shape(tree) == [
            ("id", 1, 1, []),
            ("pos", 2, 3, [("x", 2, 2, []), ("y", 3, 3, [])]),
            ("name", 4, 4, []),
        ]

    def test_band_of_one_does_not_descend(self) -> None:
        rows = [
            ["#", "id", "items", None],
            ["##type", "int", "x", "y"],
        ]
        tree, band = _build(rows, [_merge(1, 1, 2, 3)])
        assert band == 1
        assert _shape(tree) == [("id", 1, 1, []), ("items", 2, 3, [])]

    def test_band_from_tallest_merge(self) -> None:
        rows = [
            ["#", "id", "a", None, None],
            [None, None, "b", None, "c"],
            [None, None, "x", "y", None],
        ]
        merges = [_merge(1, 1, 2, 4), _merge(2, 2, 2, 3), _merge(1, 3, 1, 1)]
        tree, band = _build(rows, merges)
        assert band == 3
        assert _shape(tree) == [
            ("id", 1, 1, []),
            ("a", 2, 4, [("b", 2, 3, [("x", 2, 2, []), ("y", 3, 3, [])]), ("c", 4, 4, [])]),
        ]

    def test_merge_declaration_order_is_restored(self) -> None:
        rows = [
            ["##var", "first", None, "second", None],
            [None, "a", "b", "c", "d"],
        ]
        merges = [_merge(1, 2, 0, 0), _merge(1, 1, 3, 4), _merge(1, 1, 1, 2)]
        tree, _ = _build(rows, merges)
        children = tree.children(tree.root_id)
        assert [c.name for c in children] == ["first", "second"]
        assert [c.from_column for c in children] == [1, 3]

    def test_children_strictly_increasing(self) -> None:
        rows = [
            ["##var", "z", "pos", None, "a", "m", None],
            [None, None, "y", "x", None, "q", "p"],
        ]
        merges = [_merge(1, 2, 0, 0), _merge(1, 1, 5, 6), _merge(1, 1, 2, 3)]
        tree, _ = _build(rows, merges)
        for node in [tree.root, *(n for _, n in tree.walk())]:
            starts = [c.from_column for c in tree.children(node.id)]
            assert starts == sorted(set(starts))

    def test_blank_merge_ignored_and_claims_columns(self) -> None:
        rows = [["#", "id", None, "ghost"]]
        tree, _ = _build(rows, [_merge(1, 1, 2, 3)])
        assert [c.name for c in tree.children(tree.root_id)] == ["id"]

    def test_merge_name_duplicates_bare_column(self) -> None:
        rows = [["#", "pos", "pos", None]]
        with pytest.raises(DuplicateTitleError):
            _build(rows, [_merge(1, 1, 2, 3)])

    def test_merge_outside_parent_range_ignored(self) -> None:
        rows = [
            ["##var", "a", None, "b"],
            [None, "x", "y", "z"],
        ]
        # anchored on the sub-header line but straddling both parents, so it
        # is not treated as a merge inside either of them
        merges = [_merge(1, 2, 0, 0), _merge(1, 1, 1, 2), _merge(2, 2, 2, 3)]
        tree, _ = _build(rows, merges)
        a = tree.child(tree.root_id, "a")
        assert _shape(tree, a.id) == [("x", 1, 1, []), ("y", 2, 2, [])]
        b = tree.child(tree.root_id, "b")
        assert b.is_leaf

    def test_root_bare_column_stays_leaf_in_tall_band(self) -> None:
        rows = [
            ["##var", "id", "pos", None],
            [None, "note", "x", "y"],
        ]
        tree, band = _build(rows, [_merge(1, 2, 0, 0), _merge(1, 1, 2, 3)])
        assert band == 2
        assert tree.child(tree.root_id, "id").is_leaf
        assert _shape(tree) == [
            ("id", 1, 1, []),
            ("pos", 2, 3, [("x", 2, 2, []), ("y", 3, 3, [])]),
        ]

    def test_merge_on_tag_column_only_sets_band(self) -> None:
        rows = [["##var", "id"], [None, None]]
        tree, band = _build(rows, [_merge(1, 2, 0, 0)])
        assert band == 2
        assert _shape(tree) == [("id", 1, 1, [])]

    def test_header_band_taller_than_grid(self) -> None:
        tree, band = _build([["##var", "id"]], [_merge(1, 3, 0, 0)])
        assert band == 3
        assert _shape(tree) == [("id", 1, 1, [])]


class TestFailures:
    def test_no_rows(self) -> None:
        with pytest.raises(NoFieldsDefinedError):
            _build([])

    def test_tag_column_only(self) -> None:
        with pytest.raises(NoColumnsDefinedError) as info:
            _build([["#"], ["##"]])
        assert info.value.code is SheetErrorCode.E_NO_COLUMNS

    def test_no_titles(self) -> None:
        with pytest.raises(NoColumnsDefinedError) as info:
            _build([["#", None, "  "]])
        assert info.value.code is SheetErrorCode.E_NO_COLUMNS
