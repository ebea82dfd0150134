from __future__ import annotations

from typing import Iterable

from prqa_core.providers.base import BaseSuggester


class AnthropicSuggester(BaseSuggester):
    PREFERRED_MODELS = (
        "claude-sonnet-4-5-20250929",
        "claude-sonnet-4-20250514",
        "claude-3-5-haiku-20241022",
    )
    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    MAX_TOKENS = 2048

    def __init__(self, api_key: str, preferred_models=None, default_model=None, timeout: float = 60.0):
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'prqa[anthropic]'"
            )
        super().__init__(preferred_models, default_model)
        self.client = Anthropic(api_key=api_key, timeout=timeout)

    def _list_models(self) -> Iterable[str]:
        return [m.id for m in self.client.models.list()]

    def _call_api(self, model: str, prompt: str) -> str:
        # Imported inside the method because the anthropic package is optional;
        # __init__ already validated it is installed before we reach here.
        from anthropic.types import TextBlock

        response = self.client.messages.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.MAX_TOKENS,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks)
