"""CI step output.

GitHub Actions reads step outputs from the file named by $GITHUB_OUTPUT.
Multi-line values use the heredoc form

    name<<DELIMITER
    value
    DELIMITER

with a random delimiter, the same format @actions/core writes.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Optional

logger = logging.getLogger(__name__)


def _delimiter(value: str) -> str:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in value:
        raise ValueError("Output value contains the generated delimiter.")
    return delimiter


def set_output(name: str, value: str, output_path: Optional[str] = None) -> bool:
    """Append ``name`` = ``value`` to the step output file.

    Returns False without writing when no output file is configured (e.g. a
    local run), so the caller can print the value instead.
    """
    path = output_path or os.environ.get("GITHUB_OUTPUT")
    if not path:
        logger.debug("GITHUB_OUTPUT is not set; output %r not written.", name)
        return False

    delimiter = _delimiter(value)
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    logger.debug("Wrote output %r (%d chars) to %s", name, len(value), path)
    return True
