"""
Tests for the eager path index: authoritative sizes, key scheme, agreement
with the on-demand resolver and the duplicate-name policy.
"""
import json

import pytest

from ncdu_view.decoder import decode
from ncdu_view.index import PathIndex, build_index, path_key
from ncdu_view.resolver import EMPTY_DIRECTORY, resolve

from export_samples import SAMPLE_TOTAL_SIZE, dir_item, file_item, flagged


@pytest.fixture
def tree(any_export):
    _, root = decode(any_export)
    return root


@pytest.fixture
def index(tree):
    return build_index(tree)


def _names(entries):
    return [e.name for e in entries]


def _segments(key):
    return key.split("/") if key else []


class TestKeys:
    def test_path_key(self):
        assert path_key([]) == ""
        assert path_key(["a"]) == "a"
        assert path_key(["a", "b"]) == "a/b"

    def test_every_directory_is_indexed(self, index):
        assert sorted(index.keys()) == ["", "user1", "user1/empty", "user1/projects", "user2"]
        assert len(index) == 5
        assert "user1/projects" in index

    def test_files_are_not_indexed(self, index):
        assert index.lookup(["f.txt"]) is None
        assert index.lookup(["user1", "todo.txt"]) is None

    def test_missing_path(self, index):
        assert index.lookup(["user1", "missing"]) is None
        assert index.get("nope") is None


class TestAuthoritativeSizes:
    def test_root_listing(self, index):
        listing = index.lookup([])

        assert _names(listing.directories) == ["user1", "user2"]
        # user1 declares 1000 but its files add up to 800
        assert [d.size for d in listing.directories] == [800, 500]
        assert listing.current.size == SAMPLE_TOTAL_SIZE
        assert index.root_size == SAMPLE_TOTAL_SIZE
        assert listing.total_items == 3
        assert listing.error is None

    def test_nested_listing(self, index):
        listing = index.lookup(["user1"])

        assert listing.path == ["user1"]
        assert listing.current.name == "user1"
        assert listing.current.size == 800
        assert listing.current.item_count == 3
        assert [(d.name, d.size) for d in listing.directories] == [("projects", 750), ("empty", 0)]
        assert [(f.name, f.size) for f in listing.files] == [("todo.txt", 50)]

    def test_stale_zero_directory_size_is_corrected(self):
        _, root = decode(flagged(dir_item("d", file_item("x", 50), dsize=0)))
        index = build_index(root)

        entry = index.lookup([]).directories[0]
        assert entry.name == "d"
        assert entry.size == 50
        assert index.lookup(["d"]).current.size == 50

    def test_sizes_consistent_with_children(self, index):
        for key in index.keys():
            listing = index.get(key)
            children_total = sum(d.size for d in listing.directories) + sum(f.size for f in listing.files)
            assert listing.current.size == children_total

    def test_child_entry_matches_child_listing(self, index):
        for key in index.keys():
            for entry in index.get(key).directories:
                child_key = f"{key}/{entry.name}" if key else entry.name
                assert index.get(child_key).current.size == entry.size


class TestListingContract:
    def test_sorted_largest_first(self, index):
        for key in index.keys():
            listing = index.get(key)
            dir_sizes = [d.size for d in listing.directories]
            file_sizes = [f.size for f in listing.files]
            assert dir_sizes == sorted(dir_sizes, reverse=True)
            assert file_sizes == sorted(file_sizes, reverse=True)

    def test_empty_directory(self, index):
        listing = index.lookup(["user1", "empty"])
        assert listing.total_items == 0
        assert listing.error == EMPTY_DIRECTORY
        assert listing.path == ["user1", "empty"]

    def test_agrees_with_resolver_on_structure(self, tree, index):
        for key in index.keys():
            indexed = index.get(key)
            resolved = resolve(tree, _segments(key))
            assert resolved.path == indexed.path
            assert set(_names(resolved.directories)) == set(_names(indexed.directories))
            assert set(_names(resolved.files)) == set(_names(indexed.files))
            assert resolved.error == indexed.error

    def test_index_is_read_only(self, index):
        with pytest.raises(TypeError):
            index._listings["new"] = index.lookup([])


class TestDuplicates:
    def test_first_duplicate_directory_is_indexed(self):
        _, root = decode(flagged(
            dir_item("dup", file_item("first.txt", 1)),
            dir_item("dup", file_item("second.txt", 2), dir_item("only-in-second", file_item("z", 4))),
        ))
        index = build_index(root)

        assert _names(index.lookup(["dup"]).files) == ["first.txt"]
        assert index.lookup(["dup", "only-in-second"]) is None
        # Both copies still count toward the parent
        root_listing = index.lookup([])
        assert [d.size for d in root_listing.directories] == [6, 1]
        assert root_listing.current.size == 7

    def test_index_and_resolver_pick_the_same_duplicate(self):
        _, root = decode(flagged(
            dir_item("dup", file_item("a", 1)),
            dir_item("dup", file_item("b", 100)),
        ))
        index = build_index(root)
        assert _names(index.lookup(["dup"]).files) == _names(resolve(root, ["dup"]).files)

    def test_file_shadows_later_directory(self):
        _, root = decode(flagged(file_item("dup", 1), dir_item("dup", file_item("x", 2))))
        index = build_index(root)
        assert index.lookup(["dup"]) is None
        assert index.root_size == 3


def test_repr():
    _, root = decode(flagged(file_item("a", 1)))
    assert isinstance(build_index(root), PathIndex)
    assert repr(build_index(root)) == "PathIndex(directories=1, root_size=1)"
