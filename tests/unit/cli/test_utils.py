"""Unit tests for CLI utilities."""

import json

import pytest

from careergalaxy.cli.utils import build_session, load_paths, load_settings, load_taxonomy
from careergalaxy.core.taxonomy import TaxonomyError, TaxonomyStore


class TestLoadPaths:
    def test_none(self):
        assert load_paths(None) == []

    def test_json_mapping(self, paths_file):
        paths = load_paths(paths_file)
        assert len(paths) == 2
        assert paths[0].search_query == "ai engineer"

    def test_yaml_list(self, tmp_path):
        f = tmp_path / "paths.yaml"
        f.write_text("- type: Aspirational\n  nodeRefs: [sc-tech]\n")
        paths = load_paths(str(f))
        assert paths[0].type == "Aspirational"
        assert paths[0].node_refs == ("sc-tech",)

    def test_invalid_entries_warned(self, tmp_path, capsys):
        f = tmp_path / "paths.json"
        f.write_text(json.dumps([{"nodeRefs": ["a"]}, "junk"]))
        assert len(load_paths(str(f))) == 1
        assert "Skipping invalid path 1" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="Failed to parse"):
            load_paths(str(tmp_path / "missing.json"))

    def test_not_a_list(self, tmp_path):
        f = tmp_path / "paths.json"
        f.write_text(json.dumps({"paths": "nope"}))
        with pytest.raises(ValueError, match="expected a list"):
            load_paths(str(f))

    def test_bad_json(self, tmp_path):
        f = tmp_path / "paths.json"
        f.write_text("{")
        with pytest.raises(ValueError, match="Failed to parse"):
            load_paths(str(f))


class TestLoaders:
    def test_default_taxonomy(self):
        assert load_taxonomy(None) is TaxonomyStore.default()

    def test_taxonomy_file_errors(self, tmp_path):
        with pytest.raises(TaxonomyError):
            load_taxonomy(str(tmp_path / "missing.yaml"))

    def test_settings_default(self):
        assert load_settings(None).level_policy == "trust"


class TestBuildSession:
    def test_builds(self, paths_file, tmp_path):
        session = build_session(None, str(tmp_path / "galaxy.toml"), paths_file)
        assert session.get_node("ai-p0-l2-ai-engineer").parent_id == "ind-software"

    def test_reports_load_errors(self, tmp_path, capsys):
        assert build_session(str(tmp_path / "missing.yaml")) is None
        assert "Failed to read taxonomy" in capsys.readouterr().err

    def test_reports_merge_issues(self, tmp_path, capsys):
        f = tmp_path / "paths.json"
        f.write_text(json.dumps([{"nodeRefs": ["ghost"]}]))
        session = build_session(paths_file=str(f))
        assert session is not None
        assert "unknown node id 'ghost'" in capsys.readouterr().err
