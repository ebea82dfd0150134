"""init command — write .prqa.yml and a GitHub Actions workflow.

The workflow runs `prqa suggest` on every PR update and hands the `body`
step output to a second step that posts it as a PR comment.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click
import yaml
from rich.console import Console

from prqa_core.config import API_KEY_ENV

console = Console()

_WORKFLOW_TEMPLATE = """\
name: QA test suggestions

on:
  pull_request:
    types: [opened, synchronize, reopened]

jobs:
  qa-suggestions:
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: write

    steps:
      - uses: actions/checkout@v4

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install prqa
        run: pip install "{requirement}"

      - name: Generate QA suggestions
        id: qa
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
          {api_key_env}: ${{{{ secrets.{api_key_env} }}}}
          PR_NUMBER: ${{{{ github.event.pull_request.number }}}}
          REPO: ${{{{ github.repository }}}}
        run: prqa suggest

      - name: Post PR comment
        env:
          GH_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
          BODY: ${{{{ steps.qa.outputs.body }}}}
        run: gh pr comment ${{{{ github.event.pull_request.number }}}} --repo ${{{{ github.repository }}}} --body "$BODY"
"""


@click.command("init")
@click.option("--yes", "-y", is_flag=True, help="Accept defaults without prompting.")
def init_cmd(yes: bool):
    """Set up prqa for a repository.

    Creates .prqa.yml and, optionally, .github/workflows/prqa.yml.
    """
    console.print("\n[bold cyan]prqa init[/bold cyan] — repository setup\n")

    if yes:
        provider, template, setup_ci = "openai", "focused", True
    else:
        provider = click.prompt("LLM provider", type=click.Choice(["openai", "anthropic"]), default="openai")
        console.print("\nPrompt templates:")
        console.print("  [bold]focused[/bold] — short, four sections plus open questions (default)")
        console.print("  [bold]full[/bold]    — fuller five-section report")
        template = click.prompt("Prompt template", type=click.Choice(["focused", "full"]), default="focused")
        setup_ci = click.confirm("\nGenerate .github/workflows/prqa.yml for GitHub Actions?", default=True)

    _write_config({"provider": provider, "template": template})
    console.print("[green]Created .prqa.yml[/green]")

    if setup_ci:
        api_key_env = API_KEY_ENV[provider]
        _write_workflow(provider, api_key_env)
        console.print("[green]Created .github/workflows/prqa.yml[/green]")
        console.print(
            f"\n[yellow]Remember to add [bold]{api_key_env}[/bold] to your "
            "GitHub repository secrets (Settings → Secrets → Actions).[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Try it locally with: [bold]prqa suggest --repo <owner/name> --pr <number> --dry-run[/bold]")


def _write_config(config: dict) -> None:
    """Write or update .prqa.yml, preserving any existing keys."""
    path = Path(".prqa.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _requirement(provider: str) -> str:
    try:
        pinned = f"=={version('prqa')}"
    except PackageNotFoundError:
        pinned = ""
    extra = "[anthropic]" if provider == "anthropic" else ""
    return f"prqa{extra}{pinned}"


def _write_workflow(provider: str, api_key_env: str) -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    workflow_path = workflow_dir / "prqa.yml"
    workflow_path.write_text(_WORKFLOW_TEMPLATE.format(requirement=_requirement(provider), api_key_env=api_key_env))
