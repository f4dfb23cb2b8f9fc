"""Tests for the file-system and git helpers."""

import subprocess
from pathlib import Path

import pytest

from devpilot.operations import Change
from devpilot.workspace import (
    Benchmark,
    apply_changes,
    changed_files,
    docs_output_path,
    format_benchmark_comparison,
    generated_test_path,
    load_context,
    run_benchmark,
)


def git(*args, cwd):
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


class TestLoadContext:
    def test_file(self, source_file):
        text = load_context(source_file)
        assert text.startswith(f"// Context from {source_file}")
        assert "getUser" in text

    def test_directory_skips_vendored_dirs(self, workdir, source_file):
        (workdir / "node_modules" / "lib").mkdir(parents=True)
        (workdir / "node_modules" / "lib" / "index.js").write_text("vendored()", encoding="utf-8")

        text = load_context(workdir)

        assert "// File: src/user.js" in text.replace("\\", "/")
        assert "vendored()" not in text

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_context(tmp_path / "nope")


class TestOutputPaths:
    @pytest.mark.parametrize("fmt, expected", [("markdown", "md"), ("html", "html"), ("json", "json")])
    def test_docs_path(self, fmt, expected):
        assert docs_output_path("src/user.js", "api", fmt) == Path("docs") / f"src/user.js.api.{expected}"

    def test_docs_path_for_absolute_target(self, tmp_path):
        assert docs_output_path(tmp_path / "user.js", "readme", "markdown") == Path("docs") / "user.js.readme.md"

    @pytest.mark.parametrize("target, framework, expected", [
        ("src/user.ts", "jest", "src/user.test.ts"),
        ("src/user.js", "vitest", "src/user.test.js"),
        ("src/user.rb", "mocha", "src/user.test.js"),
        ("pkg/user.py", "pytest", "pkg/test_user.py"),
    ])
    def test_generated_test_path(self, target, framework, expected):
        assert generated_test_path(target, framework) == Path(expected)


def test_apply_changes_writes_only_changes_with_content(source_file):
    applied = apply_changes(source_file, [
        Change("Rename getUser to findUser", content="export function findUser(id) {}\n"),
        Change("Consider caching"),
    ])
    assert applied == 1
    assert source_file.read_text(encoding="utf-8") == "export function findUser(id) {}\n"


def test_run_benchmark_without_command(tmp_path):
    target = tmp_path / "mod.py"
    target.write_text("x = 1\n" * 200, encoding="utf-8")

    result = run_benchmark(target)

    assert result.time_ms >= 0
    assert result.size_kb == round(target.stat().st_size / 1024, 2)


def test_format_benchmark_comparison():
    lines = format_benchmark_comparison(Benchmark(100.0, 50.0), Benchmark(80.0, 48.5))
    assert lines == [
        "Time: 100.0ms → 80.0ms (-20.00ms)",
        "Size: 50.0KB → 48.5KB (-1.50KB)",
    ]


def test_changed_files(tmp_path):
    git("init", cwd=tmp_path)
    git("config", "user.email", "t@t.com", cwd=tmp_path)
    git("config", "user.name", "Test", cwd=tmp_path)
    (tmp_path / "tracked.py").write_text("a = 1\n", encoding="utf-8")
    (tmp_path / "clean.py").write_text("b = 1\n", encoding="utf-8")
    git("add", ".", cwd=tmp_path)
    git("commit", "-m", "init", cwd=tmp_path)

    (tmp_path / "tracked.py").write_text("a = 2\n", encoding="utf-8")
    (tmp_path / "new.py").write_text("c = 1\n", encoding="utf-8")

    assert sorted(changed_files(tmp_path)) == ["new.py", "tracked.py"]


def test_changed_files_from_subdirectory(tmp_path):
    git("init", cwd=tmp_path)
    git("config", "user.email", "t@t.com", cwd=tmp_path)
    git("config", "user.name", "Test", cwd=tmp_path)
    pkg = tmp_path / "pkg"
    pkg.mkdir()
    (pkg / "mod.py").write_text("a = 1\n", encoding="utf-8")
    (tmp_path / "top.py").write_text("b = 1\n", encoding="utf-8")
    git("add", ".", cwd=tmp_path)
    git("commit", "-m", "init", cwd=tmp_path)

    (pkg / "mod.py").write_text("a = 2\n", encoding="utf-8")
    (tmp_path / "top.py").write_text("b = 2\n", encoding="utf-8")
    (pkg / "extra.py").write_text("c = 1\n", encoding="utf-8")

    assert sorted(changed_files(pkg)) == ["extra.py", "mod.py"]


def test_changed_files_without_commits(tmp_path):
    git("init", cwd=tmp_path)
    (tmp_path / "staged.py").write_text("a = 1\n", encoding="utf-8")
    git("add", "staged.py", cwd=tmp_path)
    (tmp_path / "untracked.py").write_text("b = 1\n", encoding="utf-8")

    assert sorted(changed_files(tmp_path)) == ["staged.py", "untracked.py"]
