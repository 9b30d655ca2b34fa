"""Tests for Config"""
import json
import pytest

from git_subrepo_keeper.config import Config


class TestConfigDefaults:

    def test_defaults(self):
        config = Config()
        assert config.default_branch == "main"
        assert config.marker_filename == ".subrepo"
        assert config.marker_format == "line"
        assert config.refresh_recorded_root is False
        assert config.dry_run is False

    def test_get_and_to_dict(self):
        config = Config(verbose=True)
        assert config.get("verbose") is True
        assert config.get("missing", "fallback") == "fallback"
        assert config.to_dict()["verbose"] is True


class TestConfigValidation:

    @pytest.mark.parametrize("branch", ["", "   ", "two words"])
    def test_bad_default_branch(self, branch):
        with pytest.raises(ValueError):
            Config(default_branch=branch)

    def test_default_branch_is_stripped(self):
        assert Config(default_branch=" trunk ").default_branch == "trunk"

    @pytest.mark.parametrize("name", ["", "..", "a/b"])
    def test_bad_marker_filename(self, name):
        with pytest.raises(ValueError):
            Config(marker_filename=name)

    def test_bad_marker_format(self):
        with pytest.raises(ValueError, match="marker_format"):
            Config(marker_format="yaml")

    def test_github_host_trailing_slash(self):
        assert Config(github_host="github.example.com/").github_host == "github.example.com"


class TestConfigLoading:

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"default_branch": "dev", "stale_days": 30})
        assert config.default_branch == "dev"

    def test_from_file_missing_uses_defaults(self, temp_dir):
        config = Config.from_file(temp_dir / "absent.json")
        assert config == Config()

    def test_from_file_reads_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"marker_format": "keyvalue", "github_token": "tok"}))

        config = Config.from_file(path)

        assert config.marker_format == "keyvalue"
        assert config.github_token == "tok"

    def test_overrides_win_unless_none(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"verbose": True, "dry_run": True}))

        config = Config.from_file(path, verbose=None, dry_run=False)

        assert config.verbose is True
        assert config.dry_run is False

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            Config.from_file(path)

    def test_non_object_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            Config.from_file(path)
