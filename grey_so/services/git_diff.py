"""Git diff collection for prompt context.

``generate_git_diff`` never raises: every failure, including rejected
arguments, comes back as a ``GitDiffFailure`` so callers branch on ``ok``.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from loguru import logger

from grey_so.core.exceptions import GreySoError
from grey_so.utils.validation import validate_file_path, validate_git_ref

GIT_DIFF_TIMEOUT = 10  # seconds
MAX_DIFF_BYTES = 1024 * 1024


@dataclass(frozen=True)
class GitDiffSuccess:
    diff: str
    ok: Literal[True] = True


@dataclass(frozen=True)
class GitDiffFailure:
    error: str
    ok: Literal[False] = False


GitDiffResult = GitDiffSuccess | GitDiffFailure


def _run_git_diff(repo: str, files: Sequence[str], base_ref: str) -> str:
    proc = subprocess.run(
        ["git", "diff", base_ref, "--", *files],
        cwd=repo,
        capture_output=True,
        timeout=GIT_DIFF_TIMEOUT,
        check=False,
    )
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise RuntimeError(f"git diff exited with code {proc.returncode}: {stderr}")
    if len(proc.stdout) > MAX_DIFF_BYTES:
        raise RuntimeError(f"git diff output exceeds {MAX_DIFF_BYTES} bytes")
    return proc.stdout.decode("utf-8", errors="replace")


def generate_git_diff(
    repo_path: str | None,
    files: Sequence[str],
    base_ref: str = "HEAD",
) -> GitDiffResult:
    """Diff ``files`` in ``repo_path`` against ``base_ref``.

    Args:
        repo_path: Repository directory (defaults to the current directory)
        files: Paths to include; must not be empty
        base_ref: Git reference to compare against

    Returns:
        GitDiffSuccess with the raw diff text, or GitDiffFailure
    """
    if not files:
        return GitDiffFailure(error="No files specified for git diff")

    try:
        validate_git_ref(base_ref)
        for file in files:
            validate_file_path(file)
    except GreySoError as e:
        return GitDiffFailure(error=str(e))

    repo = repo_path or os.getcwd()
    try:
        diff = _run_git_diff(repo, files, base_ref)
    except subprocess.TimeoutExpired:
        return GitDiffFailure(error=f"git diff timed out after {GIT_DIFF_TIMEOUT}s")
    except (OSError, RuntimeError) as e:
        logger.debug(f"git diff failed in {repo}: {e}")
        return GitDiffFailure(error=str(e))

    return GitDiffSuccess(diff=diff)
