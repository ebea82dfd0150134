"""Core QA-suggestion orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console

from prqa_core.config import Settings, load_template
from prqa_core.context import MAX_FILES, MAX_PATCH_CHARS
from prqa_core.gh.pull_request import fetch_pr_context, get_repo
from prqa_core.prompts import compose_prompt
from prqa_core.providers.anthropic import AnthropicSuggester
from prqa_core.providers.base import BaseSuggester, Completion
from prqa_core.providers.openai import OpenAISuggester

console = Console(stderr=True)
logger = logging.getLogger(__name__)

COMMENT_HEADER = "### ✅ QA test suggestions (LLM)"
DISCLAIMER = "> Generated from PR diff. Please treat as recommendations, not a gate."


@dataclass(frozen=True)
class SuggestionResult:
    """Result returned by run_suggestions — the comment body plus what produced it.

    ``degraded`` is True when the completion failed and ``body`` carries the
    fallback warning instead of model output. The run still succeeded.
    """

    body: str
    model: str
    degraded: bool
    files_analyzed: int
    files_total: int


def build_suggester(config: dict, settings: Settings) -> BaseSuggester:
    provider = config["provider"]
    kwargs = {
        "api_key": settings.api_key,
        "preferred_models": config.get("preferred_models"),
        "default_model": config.get("default_model"),
        "timeout": config.get("timeout", 60.0),
    }
    if provider == "openai":
        return OpenAISuggester(**kwargs)
    if provider == "anthropic":
        return AnthropicSuggester(**kwargs)
    raise ValueError(f"Unknown provider: {provider!r}. Choose 'openai' or 'anthropic'.")


def format_comment(completion: Completion, files_analyzed: int, files_total: int) -> str:
    """Build the PR comment body from a completion outcome."""
    if completion.degraded:
        model_note = f"<sub>Attempted model: {completion.model}</sub>"
    else:
        model_note = f"<sub>Model: {completion.model}</sub>"

    return f"""
{COMMENT_HEADER}

{DISCLAIMER}

{completion.text}

<sub>Files analyzed: {files_analyzed} (of {files_total})</sub>
{model_note}
""".strip()


def run_suggestions(
    settings: Settings,
    config: dict,
    repo_obj=None,
    suggester: BaseSuggester | None = None,
    instructions: str | None = None,
) -> SuggestionResult:
    """Run the full pipeline and return the comment body.

    Raises ContextFetchError when the PR cannot be fetched — there is nothing
    to comment on without it. A failed completion does not raise; the result
    is marked degraded and its body explains what went wrong.

    ``suggester`` and ``instructions`` are built from ``config`` when not
    given; callers that validate up front pass them in.
    """
    timeout = config.get("timeout", 60.0)
    this_repo = repo_obj if repo_obj is not None else get_repo(settings.repo, settings.github_token, timeout)

    context = fetch_pr_context(
        this_repo,
        settings.pr_number,
        max_files=config.get("max_files", MAX_FILES),
        max_patch_chars=config.get("max_patch_chars", MAX_PATCH_CHARS),
    )
    console.print(
        f"[dim]Fetched PR #{settings.pr_number} in {settings.repo}: "
        f"{len(context.files)} of {context.total_files} file(s) included.[/dim]"
    )

    if instructions is None:
        instructions = load_template(config)
    prompt = compose_prompt(instructions, context)
    logger.debug("Prompt is %d characters.", len(prompt))

    if suggester is None:
        suggester = build_suggester(config, settings)
    model = suggester.choose_model()
    console.print(f"[cyan]Requesting QA suggestions from {model}...[/cyan]")

    completion = suggester.suggest(prompt, model=model)
    if completion.degraded:
        console.print(f"[yellow]LLM call failed ({completion.reason}); posting fallback notice.[/yellow]")

    body = format_comment(completion, len(context.files), context.total_files)
    return SuggestionResult(
        body=body,
        model=completion.model,
        degraded=completion.degraded,
        files_analyzed=len(context.files),
        files_total=context.total_files,
    )
