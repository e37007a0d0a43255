"""
Source Tree Walker 단위 테스트
"""
import errno
import logging
import os

import pytest

from llm_testgen.core.walker import iter_source_files
from llm_testgen.languages import GoProfile, PythonProfile


@pytest.fixture
def source_tree(tmp_path):
    """여러 언어와 제외 디렉터리가 섞인 소스 트리"""
    files = [
        "a.go",
        "a_test.go",
        "x.py",
        "test_x.py",
        "README.md",
        "sub/b.go",
        "sub/conftest.py",
        "vendor/c.go",
        ".hidden/d.go",
        "testdata/e.go",
        "node_modules/f.py",
    ]
    for name in files:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
    return tmp_path


class TestIterSourceFiles:
    """iter_source_files 테스트"""

    def test_go_only(self, source_tree):
        found = [(p.relative_to(source_tree).as_posix(), profile.name)
                 for p, profile in iter_source_files(source_tree, [GoProfile()])]

        assert found == [("a.go", "go"), ("sub/b.go", "go")]

    def test_multiple_profiles(self, source_tree):
        found = [(p.relative_to(source_tree).as_posix(), profile.name)
                 for p, profile in iter_source_files(source_tree, [GoProfile(), PythonProfile()])]

        assert found == [("a.go", "go"), ("x.py", "python"), ("sub/b.go", "go")]

    def test_single_file_root(self, source_tree):
        found = list(iter_source_files(source_tree / "sub" / "b.go", [GoProfile()]))

        assert [p.name for p, _ in found] == ["b.go"]

    def test_single_ineligible_file_root(self, source_tree):
        assert list(iter_source_files(source_tree / "a_test.go", [GoProfile()])) == []

    def test_missing_root(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(iter_source_files(tmp_path / "missing", [GoProfile()]))

    def test_unreadable_directory_is_skipped(self, source_tree, monkeypatch, caplog):
        """읽을 수 없는 디렉터리는 경고 후 건너뛰고 나머지는 계속 탐색"""
        real_scandir = os.scandir
        blocked = source_tree / "sub"

        def scandir(path="."):
            if os.fspath(path) == os.fspath(blocked):
                raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)

        with caplog.at_level(logging.WARNING, logger="llm_testgen"):
            found = [p.relative_to(source_tree).as_posix()
                     for p, _ in iter_source_files(source_tree, [GoProfile()])]

        assert found == ["a.go"]
        assert any(
            record.levelno == logging.WARNING and str(blocked) in record.getMessage()
            for record in caplog.records
        )
