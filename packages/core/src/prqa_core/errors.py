"""Exception hierarchy for prqa.

Only fatal conditions are modelled as exceptions. Recoverable failures
(model listing, the completion call itself) are turned into values inside
the provider layer and never reach the caller as an exception.
"""

from __future__ import annotations


class PRQAError(Exception):
    """Base class for errors that abort a run."""


class ConfigError(PRQAError):
    """A required setting is missing or malformed."""


class ContextFetchError(PRQAError):
    """The pull request metadata or its changed files could not be fetched."""
