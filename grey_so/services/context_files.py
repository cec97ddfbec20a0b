"""Context file admission and loading.

Every file in a batch is checked before any content is read for the prompt,
so one disallowed file rejects the whole request.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from grey_so.core.exceptions import (
    BinaryFileRejected,
    FilesNotFound,
    FileTooLarge,
    SensitiveFileBlocked,
)

MAX_CONTEXT_FILE_BYTES = 200_000
BINARY_SNIFF_BYTES = 8_192

SENSITIVE_PATH_PATTERNS = [
    re.compile(r"(^|/)\.env(\..*)?$", re.IGNORECASE),
    re.compile(r"(^|/)\.git(/|$)", re.IGNORECASE),
    re.compile(r"(^|/)\.npmrc$", re.IGNORECASE),
    re.compile(r"(^|/)\.netrc$", re.IGNORECASE),
    re.compile(r"(^|/)id_(rsa|dsa|ecdsa|ed25519)$", re.IGNORECASE),
    re.compile(r"\.(pem|p12|pfx|key)$", re.IGNORECASE),
]


@dataclass(frozen=True)
class ContextFile:
    original_path: str
    resolved_path: Path
    content: str


def is_sensitive_path(path: str) -> bool:
    normalized = path.replace("\\", "/")
    return any(pattern.search(normalized) for pattern in SENSITIVE_PATH_PATTERNS)


def is_likely_binary(path: Path) -> bool:
    with open(path, "rb") as f:
        head = f.read(BINARY_SNIFF_BYTES)
    return b"\x00" in head


def validate_context_files(files: Sequence[str]) -> list[Path]:
    """Check that every file may be shared with a backend.

    Returns:
        Resolved absolute paths, in input order

    Raises:
        FilesNotFound: Listing every missing file
        SensitiveFileBlocked: Credential-like or VCS-internal path
        FileTooLarge: File over MAX_CONTEXT_FILE_BYTES
        BinaryFileRejected: NUL byte in the first 8 KiB
    """
    resolved = [Path(f).resolve() for f in files]
    missing = [str(p) for p in resolved if not p.is_file()]
    if missing:
        raise FilesNotFound(missing)

    for original, path in zip(files, resolved):
        if is_sensitive_path(original) or is_sensitive_path(str(path)):
            raise SensitiveFileBlocked(original)
        if path.stat().st_size > MAX_CONTEXT_FILE_BYTES:
            raise FileTooLarge(original, MAX_CONTEXT_FILE_BYTES)
        if is_likely_binary(path):
            raise BinaryFileRejected(original)

    return resolved


def load_context_files(files: Sequence[str]) -> list[ContextFile]:
    """Validate then read files as UTF-8 text for embedding in a prompt."""
    resolved = validate_context_files(files)
    return [
        ContextFile(
            original_path=original,
            resolved_path=path,
            content=path.read_text(encoding="utf-8", errors="replace"),
        )
        for original, path in zip(files, resolved)
    ]
