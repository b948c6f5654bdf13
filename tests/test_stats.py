"""Tests for referenced-path collection"""

import json
import os

import pytest

from asset_audit.stats import collect_referenced_paths, load_referenced_paths


def _abs(base, *parts):
    return os.path.realpath(os.path.join(str(base), *parts))


class TestCollectFromStats:
    def test_module_resources_and_assets(self, tmp_path):
        stats = {
            "modules": [
                {"resource": str(tmp_path / "src" / "logo.png")},
                {"identifier": f"file-loader!{tmp_path / 'src' / 'hero.JPG'}?size=2"},
                {"name": "./src/icon.svg"},
                {"resource": str(tmp_path / "src" / "index.js")},
                {"modules": [{"name": "./src/nested.gif"}]},
                "not-a-module",
            ],
            "assets": [
                {"name": "img/x.123.webp", "info": {"sourceFilename": "assets/x.webp"}},
                {"name": "main.js", "info": {}},
                {"name": "font.woff", "info": {"sourceFilename": "fonts/a.woff"}},
            ],
        }
        assert collect_referenced_paths(stats, tmp_path) == {
            _abs(tmp_path, "src", "logo.png"),
            _abs(tmp_path, "src", "hero.JPG"),
            _abs(tmp_path, "src", "icon.svg"),
            _abs(tmp_path, "src", "nested.gif"),
            _abs(tmp_path, "assets", "x.webp"),
        }

    def test_webpack5_asset_module_identifiers(self, tmp_path):
        small = tmp_path / "src" / "small.png"
        stats = {
            "modules": [
                {"identifier": f"asset/inline|{small}", "name": "./src/small.png"},
                {
                    "identifier": f"asset/resource|{tmp_path / 'src' / 'big.jpg'}",
                    "nameForCondition": str(tmp_path / "src" / "big.jpg"),
                    "name": "./src/big.jpg",
                },
                {"identifier": f"asset|{tmp_path / 'src' / 'mid.gif'}"},
            ]
        }
        assert collect_referenced_paths(stats, tmp_path) == {
            _abs(tmp_path, "src", "small.png"),
            _abs(tmp_path, "src", "big.jpg"),
            _abs(tmp_path, "src", "mid.gif"),
        }

    def test_extension_filter(self, tmp_path):
        stats = {"modules": [{"name": "./a.png"}, {"name": "./b.bmp"}]}
        assert collect_referenced_paths(stats, tmp_path, [".bmp"]) == {_abs(tmp_path, "b.bmp")}

    def test_list_of_paths(self, tmp_path):
        paths = ["a.png", str(tmp_path / "b.jpg"), "", 3]
        assert collect_referenced_paths(paths, tmp_path) == {
            _abs(tmp_path, "a.png"),
            _abs(tmp_path, "b.jpg"),
        }

    def test_rejects_other_documents(self, tmp_path):
        with pytest.raises(ValueError):
            collect_referenced_paths("a.png", tmp_path)


class TestLoadReferencedPaths:
    def test_json_stats_file(self, tmp_path):
        source = tmp_path / "stats.json"
        source.write_text(json.dumps({"modules": [{"name": "./a.png"}]}), encoding="utf-8")
        assert load_referenced_paths(source, tmp_path) == {_abs(tmp_path, "a.png")}

    def test_text_file(self, tmp_path):
        source = tmp_path / "used.txt"
        source.write_text("# used images\na.png\n\n  img/b.gif  \n", encoding="utf-8")
        assert load_referenced_paths(source, tmp_path) == {
            _abs(tmp_path, "a.png"),
            _abs(tmp_path, "img", "b.gif"),
        }

    def test_indented_comments_are_skipped(self, tmp_path):
        source = tmp_path / "used.txt"
        source.write_text("  # note.png\n\t#old.png\na.png\n", encoding="utf-8")
        assert load_referenced_paths(source, tmp_path) == {_abs(tmp_path, "a.png")}

    def test_invalid_json(self, tmp_path):
        source = tmp_path / "stats.json"
        source.write_text("{", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_referenced_paths(source, tmp_path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_referenced_paths(tmp_path / "absent.json", tmp_path)
