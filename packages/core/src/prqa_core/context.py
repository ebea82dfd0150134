"""Bounded PR context handed to the prompt composer.

GitHub can return hundreds of changed files and multi-megabyte patches for a
single PR. Everything here exists to keep the prompt at a predictable size:
only the first ``max_files`` files (in the order GitHub returns them) are
kept, and every patch is cut at ``max_patch_chars`` characters.
"""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_FILES = 30
MAX_PATCH_CHARS = 4000

TRUNCATION_MARKER = "\n…(truncated)"
# GitHub omits the patch for binary files and very large diffs.
MISSING_PATCH = "(no patch provided by GitHub for this file)"


@dataclass(frozen=True)
class PRMetadata:
    title: str = ""
    author: str = ""
    base_ref: str = ""
    head_ref: str = ""
    url: str = ""


@dataclass(frozen=True)
class ChangedFile:
    filename: str
    status: str
    additions: int
    deletions: int
    patch: str


@dataclass(frozen=True)
class PRContext:
    """PR metadata plus the bounded file list.

    ``total_files`` is the number of changed files before bounding, so the
    comment footer can report "K of N" even when files were dropped.
    """

    metadata: PRMetadata
    files: list[ChangedFile] = field(default_factory=list)
    total_files: int = 0


def truncate(text: str | None, limit: int) -> str:
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def safe_patch(patch: str | None) -> str:
    return patch or MISSING_PATCH


def bound_files(files: list, limit: int = MAX_FILES) -> list:
    """Return the first ``limit`` files, preserving API order."""
    return list(files[:limit])


def to_changed_file(file, max_patch_chars: int = MAX_PATCH_CHARS) -> ChangedFile:
    """Convert a PyGithub File (or any object with the same attributes)."""
    return ChangedFile(
        filename=file.filename,
        status=file.status or "",
        additions=file.additions or 0,
        deletions=file.deletions or 0,
        patch=truncate(safe_patch(file.patch), max_patch_chars),
    )
