"""Tests for saved layout sidecar files."""

from pathlib import Path

import pytest

from schemalayout.schema.layout_file import (
    DEFAULT_POSITION,
    SavedLayout,
    get_layout_file_path,
    parse_layout_file,
    snap_to_grid,
    write_layout_file,
)


class TestSnapToGrid:

    @pytest.mark.parametrize("value,expected", [
        (0, 0),
        (24, 0),
        (25, 50),
        (1237, 1250),
        (1274.9, 1250),
        (-24, 0),
        (-26, -50),
    ])
    def test_snap(self, value, expected):
        assert snap_to_grid(value) == expected


class TestSavedLayout:

    def test_resolve_snaps_positions(self):
        layout = SavedLayout(document="blog")
        layout.set_position("Blog", 1237.0, 912.0)
        assert layout.resolve(["Blog"]) == {"Blog": (1250, 900)}

    def test_resolve_without_snap_rounds(self):
        layout = SavedLayout()
        layout.set_position("Blog", 1237.5, 912.2)
        assert layout.resolve(["Blog"], snap=False) == {"Blog": (1238, 912)}

    def test_missing_tables_get_default(self):
        layout = SavedLayout()
        layout.set_position("Blog", 100.0, 100.0)
        positions = layout.resolve(["Blog", "Post"])
        assert positions["Post"] == DEFAULT_POSITION
        assert positions["Blog"] == (100, 100)

    def test_update_from_positions(self):
        layout = SavedLayout()
        layout.update_from_positions({"A": (300, 675), "B": (1000, 675)})
        assert layout.get_position("B").x == 1000
        assert layout.get_position("C") is None

    def test_dict_round_trip(self):
        layout = SavedLayout(document="blog")
        layout.set_position("Blog", 1200.0, 900.0)
        restored = SavedLayout.from_dict(layout.to_dict())
        assert restored.document == "blog"
        assert restored.get_position("Blog").x == 1200.0
        assert restored.created == layout.created


class TestLayoutFiles:

    def test_sidecar_path(self):
        assert get_layout_file_path(Path("/data/blog.json")) == Path("/data/blog.layout.yaml")
        assert get_layout_file_path("shop.yml") == Path("shop.layout.yaml")

    def test_write_then_parse(self, tmp_path):
        path = tmp_path / "blog.layout.yaml"
        layout = SavedLayout(document="blog")
        layout.update_from_positions({"Blog": (1200, 900), "Post": (1900, 900)})

        assert write_layout_file(layout, path)
        assert layout.source_file == path

        loaded = parse_layout_file(path)
        assert loaded is not None
        assert loaded.source_file == path
        assert loaded.resolve(["Blog", "Post"]) == {"Blog": (1200, 900), "Post": (1900, 900)}

    def test_hand_written_file(self, tmp_path):
        path = tmp_path / "blog.layout.yaml"
        path.write_text(
            "version: 1\n"
            "document: blog\n"
            "positions:\n"
            "  Blog: {x: 1237, y: 912}\n"
        )
        loaded = parse_layout_file(path)
        assert loaded.resolve(["Blog"]) == {"Blog": (1250, 900)}

    def test_missing_file(self, tmp_path):
        assert parse_layout_file(tmp_path / "none.layout.yaml") is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "blog.layout.yaml"
        path.write_text("")
        assert parse_layout_file(path) is None

    def test_no_positions(self, tmp_path):
        path = tmp_path / "blog.layout.yaml"
        path.write_text("version: 1\npositions: {}\n")
        assert parse_layout_file(path) is None

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "blog.layout.yaml"
        path.write_text("positions: [unclosed\n")
        assert parse_layout_file(path) is None

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "blog.layout.yaml"
        path.write_text("- 1\n- 2\n")
        assert parse_layout_file(path) is None

    def test_write_failure(self, tmp_path):
        layout = SavedLayout()
        layout.set_position("A", 1.0, 2.0)
        assert not write_layout_file(layout, tmp_path / "missing_dir" / "x.layout.yaml")
