"""Git diff collection: argument guards, subprocess outcomes."""

import subprocess
from types import SimpleNamespace

import pytest

from grey_so.services import git_diff
from grey_so.services.git_diff import MAX_DIFF_BYTES, generate_git_diff
from grey_so.utils.validation import validate_file_path, validate_git_ref
from grey_so.core.exceptions import InvalidFilePath, InvalidGitRef


@pytest.fixture
def fake_run(monkeypatch):
    calls: list[tuple] = []
    outcome = {"result": SimpleNamespace(returncode=0, stdout=b"diff --git a/x b/x\n", stderr=b"")}

    def _run(*args, **kwargs):
        calls.append((args, kwargs))
        result = outcome["result"]
        if isinstance(result, BaseException):
            raise result
        return result

    monkeypatch.setattr(git_diff.subprocess, "run", _run)
    return SimpleNamespace(calls=calls, outcome=outcome)


def test_success_returns_raw_diff(fake_run, tmp_path):
    result = generate_git_diff(str(tmp_path), ["src/index.ts"], "main")

    assert result.ok
    assert result.diff == "diff --git a/x b/x\n"
    (args,), kwargs = fake_run.calls[0]
    assert args == ["git", "diff", "main", "--", "src/index.ts"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["timeout"] == git_diff.GIT_DIFF_TIMEOUT


def test_empty_file_list_fails_without_running_git(fake_run):
    result = generate_git_diff(None, [])

    assert not result.ok
    assert result.error == "No files specified for git diff"
    assert fake_run.calls == []


@pytest.mark.parametrize("ref", ["--output=/tmp/x", "HEAD;rm -rf", "main branch"])
def test_unsafe_ref_fails_without_running_git(fake_run, ref):
    result = generate_git_diff(None, ["a.py"], ref)

    assert not result.ok
    assert result.error == f"Invalid git ref: {ref}"
    assert fake_run.calls == []


@pytest.mark.parametrize("path", ["-p", "a.py;ls", "$(whoami).py", "a`b`.py"])
def test_unsafe_path_fails_without_running_git(fake_run, path):
    result = generate_git_diff(None, ["ok.py", path])

    assert not result.ok
    assert result.error == f"Invalid file path: {path}"
    assert fake_run.calls == []


def test_git_error_is_reported(fake_run):
    fake_run.outcome["result"] = SimpleNamespace(
        returncode=128, stdout=b"", stderr=b"fatal: not a git repository"
    )

    result = generate_git_diff("/tmp", ["a.py"])

    assert not result.ok
    assert "not a git repository" in result.error


def test_timeout_is_reported(fake_run):
    fake_run.outcome["result"] = subprocess.TimeoutExpired(cmd="git", timeout=10)

    result = generate_git_diff(None, ["a.py"])

    assert not result.ok
    assert "timed out" in result.error


def test_oversized_output_is_rejected(fake_run):
    fake_run.outcome["result"] = SimpleNamespace(
        returncode=0, stdout=b"x" * (MAX_DIFF_BYTES + 1), stderr=b""
    )

    result = generate_git_diff(None, ["a.py"])

    assert not result.ok
    assert "exceeds" in result.error


def test_validators_accept_ordinary_values():
    for ref in ["HEAD", "HEAD~1", "origin/main", "v1.2.3", "abc123^", "HEAD^{tree}"]:
        validate_git_ref(ref)
    validate_file_path("src/components/App.tsx")

    with pytest.raises(InvalidGitRef):
        validate_git_ref("-x")
    with pytest.raises(InvalidFilePath):
        validate_file_path("a|b")


def test_real_repository_diff(tmp_path):
    git = ["git", "-c", "user.email=t@example.com", "-c", "user.name=t"]
    try:
        subprocess.run(["git", "init", "-q"], cwd=tmp_path, check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError):
        pytest.skip("git not available")
    (tmp_path / "a.txt").write_text("one\n")
    subprocess.run(["git", "add", "a.txt"], cwd=tmp_path, check=True)
    subprocess.run([*git, "commit", "-q", "-m", "init"], cwd=tmp_path, check=True)
    (tmp_path / "a.txt").write_text("two\n")

    result = generate_git_diff(str(tmp_path), ["a.txt"])

    assert result.ok
    assert "-one" in result.diff
    assert "+two" in result.diff
