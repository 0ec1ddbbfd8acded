"""Unit tests for pub_release.toolchain.cache module."""

from pathlib import Path

from pub_release.toolchain.cache import ToolCache


def add_cached(root: Path, version: str, complete: bool = True, arch: str = "x64") -> Path:
    path = root / "flutter" / version / arch
    (path / "bin").mkdir(parents=True)
    if complete:
        (root / "flutter" / version / f"{arch}.complete").write_text("")
    return path


class TestToolCache:
    """Tests for ToolCache lookup and population."""

    def test_empty_cache(self, temp_dir: Path) -> None:
        cache = ToolCache(temp_dir / "cache")
        assert cache.versions("flutter") == []
        assert cache.find("flutter", "2.x") is None

    def test_find_highest_matching_major(self, temp_dir: Path) -> None:
        root = temp_dir / "cache"
        add_cached(root, "1.22.6")
        add_cached(root, "2.0.3")
        expected = add_cached(root, "2.2.0")
        add_cached(root, "3.0.0")

        cache = ToolCache(root)
        assert cache.versions("flutter") == ["3.0.0", "2.2.0", "2.0.3", "1.22.6"]
        assert cache.find("flutter", "2.x") == expected

    def test_incomplete_entries_ignored(self, temp_dir: Path) -> None:
        root = temp_dir / "cache"
        add_cached(root, "2.5.0", complete=False)
        assert ToolCache(root).find("flutter", "2.x") is None

    def test_other_arch_ignored(self, temp_dir: Path) -> None:
        root = temp_dir / "cache"
        add_cached(root, "2.0.3", arch="arm64")
        assert ToolCache(root, arch="x64").find("flutter", "2.x") is None
        assert ToolCache(root, arch="arm64").find("flutter", "2.x") is not None

    def test_cache_dir_copies_and_marks_complete(self, temp_dir: Path) -> None:
        source = temp_dir / "flutter"
        (source / "bin").mkdir(parents=True)
        (source / "bin" / "flutter").write_text("#!/bin/sh\n")
        cache = ToolCache(temp_dir / "cache")

        dest = cache.cache_dir(source, "flutter", "2.0.3")

        assert dest == temp_dir / "cache" / "flutter" / "2.0.3" / "x64"
        assert (dest / "bin" / "flutter").read_text() == "#!/bin/sh\n"
        assert cache.find("flutter", "2.x") == dest

    def test_cache_dir_replaces_existing(self, temp_dir: Path) -> None:
        root = temp_dir / "cache"
        stale = add_cached(root, "2.0.3")
        (stale / "stale.txt").write_text("old")
        source = temp_dir / "flutter"
        (source / "bin").mkdir(parents=True)

        ToolCache(root).cache_dir(source, "flutter", "2.0.3")

        assert not (stale / "stale.txt").exists()
