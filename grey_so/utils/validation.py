"""Argument guards for values passed to the git binary."""

from __future__ import annotations

import re

from grey_so.core.exceptions import InvalidFilePath, InvalidGitRef

SAFE_REF = re.compile(r"^[a-zA-Z0-9_./~^{}-]+$")
UNSAFE_PATH_CHARS = re.compile(r"[;|&$`\\(){}<>!#'\"]")


def validate_git_ref(ref: str) -> None:
    """Reject refs that could be parsed as options or contain odd characters."""
    if ref.startswith("-") or not SAFE_REF.fullmatch(ref):
        raise InvalidGitRef(ref)


def validate_file_path(path: str) -> None:
    """Reject option-like paths and paths carrying shell metacharacters."""
    if path.startswith("-") or UNSAFE_PATH_CHARS.search(path):
        raise InvalidFilePath(path)
