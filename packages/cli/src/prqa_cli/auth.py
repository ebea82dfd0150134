"""GitHub token resolution.

In Actions the workflow passes GITHUB_TOKEN explicitly. For local dry runs
the GitHub CLI session is reused so no personal access token has to be
created just to try prqa on a PR.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable
  2. `gh auth token`
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no source provides one.

    Never raises — load_settings() reports the missing GITHUB_TOKEN.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or hung.
        return None

    if result.returncode == 0 and result.stdout.strip():
        logger.debug("Resolved GitHub token via gh CLI session.")
        return result.stdout.strip()
    return None
