"""Tests for MarkerStore"""
import pytest

from git_subrepo_keeper.config import Config
from git_subrepo_keeper.exceptions import (
    CorruptMarkerError,
    InvalidArgumentError,
    MarkerNotFoundError,
)
from git_subrepo_keeper.models.marker import Marker
from git_subrepo_keeper.services.marker_store import MarkerStore

URL = "https://example.com/foo.git"


class TestMarkerStoreCreate:
    """Test marker creation."""

    def test_create_then_load(self, store, repo_root):
        """A created marker loads back with the same fields."""
        created = store.create(repo_root / "libs" / "foo", URL, "develop")
        loaded = store.load(repo_root / "libs" / "foo")

        assert loaded == created
        assert loaded == Marker(url=URL, branch="develop", recorded_root=str(repo_root))

    def test_create_makes_missing_directory(self, store, repo_root):
        target = repo_root / "new" / "dir"
        store.create(target, URL, "main")
        assert target.is_dir()
        assert (target / ".subrepo").is_file()

    def test_create_defaults_branch(self, store, repo_root):
        marker = store.create(repo_root / "lib", URL)
        assert marker.branch == "main"

    def test_create_uses_configured_default_branch(self, repo_root):
        store = MarkerStore(repo_root, Config(default_branch="trunk"))
        assert store.create(repo_root / "lib", URL, "  ").branch == "trunk"

    def test_create_requires_directory(self, store):
        with pytest.raises(InvalidArgumentError) as exc_info:
            store.create("", URL)
        assert exc_info.value.argument == "directory"

    def test_create_requires_url(self, store, repo_root):
        with pytest.raises(InvalidArgumentError) as exc_info:
            store.create(repo_root / "lib", "")
        assert exc_info.value.argument == "url"
        assert not (repo_root / "lib").exists()

    def test_create_overwrites_existing_marker(self, store, repo_root):
        store.create(repo_root / "lib", URL, "main")
        store.create(repo_root / "lib", "https://example.com/other.git", "dev")

        loaded = store.load(repo_root / "lib")
        assert loaded.url == "https://example.com/other.git"
        assert loaded.branch == "dev"

    def test_line_format_on_disk(self, store, repo_root):
        """The default format is the single line the shell aliases write."""
        store.create(repo_root / "lib", URL, "main")
        content = (repo_root / "lib" / ".subrepo").read_text()
        assert content == f"{URL} main {repo_root}\n"


class TestMarkerStoreLoad:
    """Test marker loading."""

    def test_load_missing_marker(self, store, repo_root):
        with pytest.raises(MarkerNotFoundError) as exc_info:
            store.load(repo_root / "nothing-here")
        assert exc_info.value.path.endswith(".subrepo")

    def test_load_too_few_fields(self, store, repo_root):
        (repo_root / ".subrepo").write_text(f"{URL} main\n")
        with pytest.raises(CorruptMarkerError):
            store.load(repo_root)

    def test_load_empty_file(self, store, repo_root):
        (repo_root / ".subrepo").write_text("")
        with pytest.raises(CorruptMarkerError):
            store.load(repo_root)

    def test_load_invalid_utf8(self, store, repo_root):
        (repo_root / ".subrepo").write_bytes(b"\xff\xfe url main /r\n")
        with pytest.raises(CorruptMarkerError) as exc_info:
            store.load(repo_root)
        assert "UTF-8" in exc_info.value.message

    def test_load_handwritten_marker(self, store, repo_root):
        """Markers written by the git subinit alias are read as-is."""
        (repo_root / ".subrepo").write_text(f"{URL} feature /old/place\n")
        marker = store.load(repo_root)
        assert marker == Marker(url=URL, branch="feature", recorded_root="/old/place")

    def test_load_keeps_spaces_in_root(self, store, repo_root):
        """Everything after the branch belongs to the recorded root."""
        store.save(repo_root, Marker(url=URL, branch="main", recorded_root="/home/me/My Projects/host"))
        assert store.load(repo_root).recorded_root == "/home/me/My Projects/host"

    def test_load_only_reads_first_line(self, store, repo_root):
        (repo_root / ".subrepo").write_text(f"{URL} main /root\nsomething else entirely\n")
        assert store.load(repo_root).recorded_root == "/root"


class TestMarkerStoreSave:
    """Test marker writes."""

    def test_line_format_rejects_whitespace(self, store, repo_root):
        with pytest.raises(InvalidArgumentError):
            store.save(repo_root, Marker(url="https://example.com/a b.git", branch="main", recorded_root="/r"))
        assert not (repo_root / ".subrepo").exists()

    def test_save_leaves_no_temp_file(self, store, repo_root):
        store.save(repo_root, Marker(url=URL, branch="main", recorded_root=str(repo_root)))
        assert sorted(p.name for p in repo_root.iterdir()) == [".subrepo"]

    def test_keyvalue_round_trip_with_awkward_values(self, repo_root):
        store = MarkerStore(repo_root, Config(marker_format="keyvalue"))
        marker = Marker(
            url="https://example.com/a b.git?x=1",
            branch="feature/with space",
            recorded_root="/home/me/My Projects/100% done",
        )
        store.save(repo_root, marker)

        assert store.load(repo_root) == marker
        lines = (repo_root / ".subrepo").read_text().splitlines()
        assert [line.split("=", 1)[0] for line in lines] == ["url", "branch", "root"]
        assert all(" " not in line for line in lines)

    def test_keyvalue_missing_key_is_corrupt(self, repo_root):
        store = MarkerStore(repo_root, Config(marker_format="keyvalue"))
        (repo_root / ".subrepo").write_text(f"url={URL}\nbranch=main\n")
        with pytest.raises(CorruptMarkerError) as exc_info:
            store.load(repo_root)
        assert "root" in str(exc_info.value)

    def test_formats_are_detected_on_load(self, repo_root):
        """A store writing keyvalue still reads line markers and vice versa."""
        line_store = MarkerStore(repo_root, Config(marker_format="line"))
        kv_store = MarkerStore(repo_root, Config(marker_format="keyvalue"))

        line_store.create(repo_root / "a", URL, "main")
        kv_store.create(repo_root / "b", URL, "dev")

        assert kv_store.load(repo_root / "a").branch == "main"
        assert line_store.load(repo_root / "b").branch == "dev"


class TestMarkerStoreFindAll:
    """Test scanning a repository for markers."""

    def test_find_all(self, store, repo_root):
        store.create(repo_root, URL, "main")
        store.create(repo_root / "libs" / "foo", URL, "main")
        (repo_root / "libs" / "bad").mkdir()
        (repo_root / "libs" / "bad" / ".subrepo").write_text("garbage\n")
        (repo_root / ".git" / "sub").mkdir(parents=True)
        (repo_root / ".git" / "sub" / ".subrepo").write_text(f"{URL} main /x\n")

        entries = {entry.directory: entry for entry in store.find_all()}

        assert set(entries) == {repo_root, repo_root / "libs" / "foo", repo_root / "libs" / "bad"}
        assert entries[repo_root / "libs" / "foo"].marker.url == URL
        assert entries[repo_root / "libs" / "bad"].marker is None
        assert entries[repo_root / "libs" / "bad"].error

    def test_find_all_empty(self, store):
        assert store.find_all() == []

    def test_find_all_reports_undecodable_marker(self, store, repo_root):
        store.create(repo_root / "good", URL, "main")
        (repo_root / "bad").mkdir()
        (repo_root / "bad" / ".subrepo").write_bytes(b"\xff\xfe url main /r\n")

        entries = {entry.directory: entry for entry in store.find_all()}

        assert len(entries) == 2
        assert entries[repo_root / "good"].marker.url == URL
        assert entries[repo_root / "bad"].marker is None
        assert "UTF-8" in entries[repo_root / "bad"].error
