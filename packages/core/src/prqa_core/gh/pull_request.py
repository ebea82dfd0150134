from __future__ import annotations

import logging

from github import Auth, Github, GithubException

from prqa_core.context import MAX_FILES, MAX_PATCH_CHARS, PRContext, PRMetadata, bound_files, to_changed_file
from prqa_core.errors import ContextFetchError

logger = logging.getLogger(__name__)

# Maximum page size for GET /repos/{owner}/{repo}/pulls/{number}/files.
PAGE_SIZE = 100


def get_repo(repo_name: str, token: str, timeout: float = 60.0):
    # retry=None: one attempt per request, no backoff.
    gh = Github(auth=Auth.Token(token), per_page=PAGE_SIZE, timeout=int(timeout), retry=None)
    try:
        return gh.get_repo(repo_name)
    except GithubException as e:
        raise ContextFetchError(f"Could not open repository {repo_name}: {e}") from e


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_files(pr) -> list:
    """Return every changed file of the PR, following pagination to the end."""
    return list(pr.get_files())


def get_metadata(pr) -> PRMetadata:
    user = getattr(pr, "user", None)
    base = getattr(pr, "base", None)
    head = getattr(pr, "head", None)
    return PRMetadata(
        title=pr.title or "",
        author=(user.login if user is not None else "") or "",
        base_ref=(base.ref if base is not None else "") or "",
        head_ref=(head.ref if head is not None else "") or "",
        url=pr.html_url or "",
    )


def fetch_pr_context(
    repo,
    pr_number: int,
    max_files: int = MAX_FILES,
    max_patch_chars: int = MAX_PATCH_CHARS,
) -> PRContext:
    """Fetch PR metadata and its bounded changed-file list.

    There is no retry and no partial result: without PR context no useful
    comment can be written, so any GitHub error aborts the run.
    """
    try:
        pr = get_pull(repo, pr_number)
        metadata = get_metadata(pr)
        files = get_files(pr)
    except GithubException as e:
        raise ContextFetchError(f"Could not fetch PR #{pr_number}: {e}") from e

    kept = bound_files(files, max_files)
    if len(kept) < len(files):
        logger.info("PR #%d changes %d files; analyzing the first %d.", pr_number, len(files), len(kept))

    return PRContext(
        metadata=metadata,
        files=[to_changed_file(f, max_patch_chars) for f in kept],
        total_files=len(files),
    )
