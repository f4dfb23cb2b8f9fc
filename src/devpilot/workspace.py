"""File-system and git helpers used by the AI commands."""

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from .operations import Change

logger = logging.getLogger(__name__)

# Upper bound on the text pulled in by --context for a directory.
MAX_CONTEXT_BYTES = 200_000

SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv", "dist", "build"}

JS_SUFFIXES = {".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"}


@dataclass
class Benchmark:
    time_ms: float
    size_kb: float


def read_source(path: Union[str, Path]) -> str:
    """Read a source file as UTF-8 text."""
    return Path(path).read_text(encoding="utf-8")


def load_context(path: Union[str, Path]) -> str:
    """Return project context from a file, or from the text files of a directory."""
    path = Path(path)
    if path.is_file():
        return f"// Context from {path}\n{read_source(path)}"
    if not path.is_dir():
        raise FileNotFoundError(f"Context path not found: {path}")

    parts = [f"// Context from {path}"]
    total = 0
    for file in sorted(path.rglob("*")):
        if not file.is_file() or any(p in SKIP_DIRS for p in file.relative_to(path).parts):
            continue
        try:
            text = file.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError):
            continue
        if total + len(text) > MAX_CONTEXT_BYTES:
            logger.debug("Context limit reached at %s", file)
            parts.append(f"// ... truncated at {file.relative_to(path)}")
            break
        total += len(text)
        parts.append(f"// File: {file.relative_to(path)}\n{text}")
    return "\n\n".join(parts)


def save_text(text: str, output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    logger.debug("Writing %d chars to %s", len(text), output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    return output_path


def _git(args: Sequence[str], cwd: Path) -> list[str]:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return [line for line in result.stdout.splitlines() if line.strip()]


def _has_head(root: Path) -> bool:
    result = subprocess.run(
        ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
        cwd=root,
        capture_output=True,
        text=True,
    )
    return result.returncode == 0


def changed_files(root: Union[str, Path]) -> list[str]:
    """Return modified and untracked files under ``root``, relative to ``root``.

    In a repository without commits, staged files stand in for the diff
    against HEAD.
    """
    root = Path(root)
    if _has_head(root):
        files = _git(["diff", "--name-only", "--relative", "HEAD"], root)
    else:
        logger.debug("No commits in %s, using staged files", root)
        files = _git(["diff", "--cached", "--name-only", "--relative"], root)
    files += _git(["ls-files", "--others", "--exclude-standard"], root)
    seen = set()
    result = []
    for name in files:
        if name in seen or not (root / name).is_file():
            continue
        seen.add(name)
        result.append(name)
    return result


def docs_output_path(target: Union[str, Path], doc_type: str, fmt: str) -> Path:
    ext = "md" if fmt == "markdown" else fmt
    target = Path(target)
    if target.is_absolute():
        target = Path(target.name)
    return Path("docs") / f"{target}.{doc_type}.{ext}"


def generated_test_path(target: Union[str, Path], framework: str) -> Path:
    target = Path(target)
    if framework == "pytest":
        return target.with_name(f"test_{target.stem}.py")
    suffix = target.suffix if target.suffix in JS_SUFFIXES else ".js"
    return target.with_name(f"{target.stem}.test{suffix}")


def apply_changes(target: Union[str, Path], changes: Sequence[Change]) -> int:
    """Write the content of each change to ``target``; return how many were written."""
    applied = 0
    for change in changes:
        if change.content is None:
            logger.info("Skipping change without content: %s", change.description)
            continue
        save_text(change.content, target)
        applied += 1
    return applied


def run_benchmark(target: Union[str, Path], command: Optional[str] = None) -> Benchmark:
    """Time ``command <target>`` if given, else the time to read and compile the target."""
    target = Path(target)
    start = time.perf_counter()
    if command:
        subprocess.run([*shlex.split(command), str(target)], check=True, capture_output=True)
    else:
        text = read_source(target)
        if target.suffix == ".py":
            compile(text, str(target), "exec")
    elapsed_ms = (time.perf_counter() - start) * 1000
    return Benchmark(time_ms=round(elapsed_ms, 2), size_kb=round(target.stat().st_size / 1024, 2))


def format_benchmark_comparison(before: Benchmark, after: Benchmark) -> list[str]:
    return [
        f"Time: {before.time_ms}ms → {after.time_ms}ms ({after.time_ms - before.time_ms:+.2f}ms)",
        f"Size: {before.size_kb}KB → {after.size_kb}KB ({after.size_kb - before.size_kb:+.2f}KB)",
    ]
