"""Tests for sailbridge/tools/paths.py: canonicalization, containment, extension policy."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from sailbridge.tools.paths import (
    file_extension,
    is_forbidden_extension,
    is_within_allowed,
    normalize_path,
)


class TestNormalizePath:
    @pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
    def test_blank_input_is_empty_sentinel(self, raw) -> None:
        assert normalize_path(raw) is None

    def test_trims_and_collapses_segments(self) -> None:
        assert normalize_path("  /a/b/./c/../d  ") == os.path.abspath("/a/b/d")

    def test_relative_input_becomes_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert normalize_path("sub/../file.txt") == str(tmp_path / "file.txt")

    @pytest.mark.parametrize("raw", ["/a/b/../c", "x/./y", "/", "/a//b/"])
    def test_is_idempotent(self, raw: str) -> None:
        once = normalize_path(raw)
        assert normalize_path(once) == once

    def test_does_not_touch_disk(self, tmp_path: Path) -> None:
        missing = tmp_path / "does" / "not" / "exist"
        assert normalize_path(str(missing)) == str(missing)


class TestIsWithinAllowed:
    def test_empty_roots_never_authorized(self, tmp_path: Path) -> None:
        assert is_within_allowed(str(tmp_path), []) is False

    def test_root_itself_is_authorized(self, tmp_path: Path) -> None:
        assert is_within_allowed(str(tmp_path), [str(tmp_path)]) is True

    def test_descendant_is_authorized(self, tmp_path: Path) -> None:
        assert is_within_allowed(str(tmp_path / "a" / "b.txt"), [str(tmp_path)]) is True

    def test_sibling_with_common_prefix_is_rejected(self, tmp_path: Path) -> None:
        root = tmp_path / "proj"
        assert is_within_allowed(str(tmp_path / "proj-evil" / "x"), [str(root)]) is False

    def test_parent_is_rejected(self, tmp_path: Path) -> None:
        assert is_within_allowed(str(tmp_path), [str(tmp_path / "proj")]) is False

    def test_traversal_out_of_root_is_rejected(self, tmp_path: Path) -> None:
        root = str(tmp_path / "proj")
        assert is_within_allowed(root + "/../../etc/passwd", [root]) is False

    def test_traversal_back_inside_root_is_allowed(self, tmp_path: Path) -> None:
        root = str(tmp_path / "proj")
        assert is_within_allowed(root + "/src/../README.md", [root]) is True

    def test_child_name_starting_with_dots_is_allowed(self, tmp_path: Path) -> None:
        assert is_within_allowed(str(tmp_path / "..hidden"), [str(tmp_path)]) is True

    def test_any_matching_root_authorizes(self, tmp_path: Path) -> None:
        roots = [str(tmp_path / "a"), str(tmp_path / "b")]
        assert is_within_allowed(str(tmp_path / "b" / "f"), roots) is True

    def test_blank_target_and_roots_are_ignored(self, tmp_path: Path) -> None:
        assert is_within_allowed("  ", [str(tmp_path)]) is False
        assert is_within_allowed(str(tmp_path / "x"), ["", "  "]) is False


class TestExtensionPolicy:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/p/a.PY", ".py"),
            ("/p/archive.tar.gz", ".gz"),
            ("/p/.env", ".env"),
            ("/p/Makefile", ""),
        ],
    )
    def test_file_extension(self, path: str, expected: str) -> None:
        assert file_extension(path) == expected

    def test_forbidden_is_case_insensitive(self) -> None:
        assert is_forbidden_extension("/p/server.PEM", [".pem"]) is True

    def test_dotfile_env_is_forbidden(self) -> None:
        assert is_forbidden_extension("/home/u/proj/.env", [".env"]) is True

    def test_dotfile_listed_by_full_name(self) -> None:
        assert is_forbidden_extension("/p/.env.local", [".env.local"]) is True

    def test_no_extension_is_never_forbidden(self) -> None:
        assert is_forbidden_extension("/p/LICENSE", [".env", ""]) is False

    def test_allowed_extension(self) -> None:
        assert is_forbidden_extension("/p/main.py", [".env", ".key"]) is False
