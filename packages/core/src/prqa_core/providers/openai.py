from __future__ import annotations

from typing import Iterable

from openai import OpenAI

from prqa_core.providers.base import BaseSuggester


class OpenAISuggester(BaseSuggester):
    # Availability depends on the account/org; newer families first.
    PREFERRED_MODELS = (
        "gpt-5",
        "gpt-5-mini",
        "gpt-5.2",
        "gpt-5.2-mini",
        "gpt-4.1-mini",
        "gpt-4.1",
        "gpt-4o-mini",
        "gpt-4o",
    )
    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(self, api_key: str, preferred_models=None, default_model=None, timeout: float = 60.0):
        super().__init__(preferred_models, default_model)
        self.client = OpenAI(api_key=api_key, timeout=timeout)

    def _list_models(self) -> Iterable[str]:
        # Iterating the page follows pagination for us.
        return [m.id for m in self.client.models.list()]

    def _call_api(self, model: str, prompt: str) -> str:
        response = self.client.responses.create(model=model, input=prompt)
        return response.output_text or ""
