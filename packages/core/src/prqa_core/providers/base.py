"""Base suggester implementing the Template Method pattern.

All providers share the same algorithm:
    choose_model() → _list_models()          ← differs per provider
    suggest()      → _call_api()             ← differs per provider
                   → Completion (ok) or Completion (degraded)

Subclasses implement three things only:
  - __init__: validate and store the SDK client
  - _list_models: return the model ids available to the credential
  - _call_api: make one raw completion call and return the text

Model selection and failure handling live here so every provider degrades
the same way: a failed model listing falls back to DEFAULT_MODEL, and a
failed completion turns into an operator-facing warning block instead of an
exception.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

logger = logging.getLogger(__name__)

NO_OUTPUT = "No output from model."
UNKNOWN_ERROR = "Unknown error"

FALLBACK_HEADER = "⚠️ **LLM test suggestions are temporarily unavailable**"
REMEDIATION_STEPS = (
    "Check API billing / quota",
    "Verify the model is available for this API key",
    "Re-run the workflow after fixing",
)


@dataclass(frozen=True)
class Completion:
    """Outcome of a single completion attempt.

    ``degraded`` is True when the call failed; ``text`` then holds the
    fallback block and ``reason`` the extracted error message.
    """

    text: str
    model: str
    degraded: bool = False
    reason: Optional[str] = None


def error_reason(exc: Optional[BaseException]) -> str:
    """Extract the most specific error message available. Never empty.

    Order: the API's structured error body (``body["error"]["message"]``, a
    string ``body["error"]``, then ``body["message"]``), then the exception's
    own message, then the literal "Unknown error".
    """
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        nested = body.get("error")
        if isinstance(nested, dict):
            nested = nested.get("message")
        # Some gateways send {"error": "<text>"}; a bare string is the message.
        for message in (nested, body.get("message")):
            if isinstance(message, str) and message.strip():
                return message.strip()

    message = getattr(exc, "message", None)
    if message and str(message).strip():
        return str(message).strip()

    text = str(exc).strip() if exc is not None else ""
    return text or UNKNOWN_ERROR


def build_fallback(reason: str) -> str:
    steps = "\n".join(f"- {step}" for step in REMEDIATION_STEPS)
    return f"""
{FALLBACK_HEADER}

Reason:
- {reason or UNKNOWN_ERROR}

What to do:
{steps}

This does **not** block the PR.
""".strip()


class BaseSuggester(ABC):
    # Most preferred first. Cheaper/faster models lead where the account has them.
    PREFERRED_MODELS: tuple[str, ...] = ()
    DEFAULT_MODEL: str = ""

    def __init__(self, preferred_models: Optional[Sequence[str]] = None, default_model: Optional[str] = None):
        self.preferred_models = list(preferred_models) if preferred_models else list(self.PREFERRED_MODELS)
        self.default_model = default_model or self.DEFAULT_MODEL

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def choose_model(self) -> str:
        """Pick the first preferred model the credential can use.

        Total: never raises and always returns a non-empty id. Listing
        failures (network, auth, permissions) are logged and answered with
        the default model.
        """
        try:
            available = set(self._list_models())
        except Exception as e:
            logger.warning(
                "%s: failed to list models, falling back to %s: %s",
                self.__class__.__name__,
                self.default_model,
                e,
            )
            return self.default_model

        for model in self.preferred_models:
            if model in available:
                return model
        logger.info("%s: no preferred model available, using %s", self.__class__.__name__, self.default_model)
        return self.default_model

    def suggest(self, prompt: str, model: Optional[str] = None) -> Completion:
        """Run exactly one completion attempt and always return a Completion."""
        model = model or self.choose_model()
        try:
            raw = self._call_api(model, prompt)
        except Exception as e:
            logger.error("%s API call with model %s failed: %s", self.__class__.__name__, model, e)
            reason = error_reason(e)
            return Completion(text=build_fallback(reason), model=model, degraded=True, reason=reason)

        text = (raw or "").strip() or NO_OUTPUT
        return Completion(text=text, model=model)

    # ------------------------------------------------------------------ #
    # Abstract — implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _list_models(self) -> Iterable[str]:
        """Return the ids of the models available to the current credential.

        May raise; choose_model() handles it.
        """

    @abstractmethod
    def _call_api(self, model: str, prompt: str) -> str:
        """Make a single completion call and return the raw text.

        Should raise on failure — suggest() turns the error into a fallback.
        """
