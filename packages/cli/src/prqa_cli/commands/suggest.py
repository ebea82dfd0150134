"""suggest command — generate QA test suggestions for a pull request."""

from __future__ import annotations

import click
from rich.console import Console

from prqa_cli.auth import resolve_github_token
from prqa_core.config import load_config, load_settings, load_template
from prqa_core.errors import ConfigError, PRQAError
from prqa_core.output import set_output
from prqa_core.runner import build_suggester, run_suggestions

console = Console(stderr=True)


@click.command("suggest")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to $REPO.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number. Defaults to $PR_NUMBER.")
@click.option(
    "--provider",
    type=click.Choice(["openai", "anthropic"]),
    default=None,
    help="LLM provider. Overrides config file.",
)
@click.option(
    "--template",
    default=None,
    help="Built-in prompt template (full, focused) or path to a Markdown file. Overrides config file.",
)
@click.option("--output-name", default=None, help="Name of the step output to write. Overrides config file.")
@click.option("--dry-run", is_flag=True, help="Print the comment body instead of writing the step output.")
@click.pass_context
def suggest_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    provider: str | None,
    template: str | None,
    output_name: str | None,
    dry_run: bool,
):
    """Generate QA test suggestions for a pull request.

    Fetches the PR and its changed files, asks the LLM what should be
    tested, and writes the Markdown comment body to the step output
    (default name: body) for a later step to post.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI locally)
      OPENAI_API_KEY       Required with --provider openai (default)
      ANTHROPIC_API_KEY    Required with --provider anthropic
      PR_NUMBER, REPO      Unless --pr / --repo are given
    """
    config_path = ctx.obj.get("config_path", ".prqa.yml") if ctx.obj else ".prqa.yml"

    try:
        config = load_config(
            config_path,
            cli_overrides={"provider": provider, "template": template, "output_name": output_name},
        )
        settings = load_settings(
            config["provider"],
            overrides={"GITHUB_TOKEN": resolve_github_token(), "PR_NUMBER": pr_number, "REPO": repo},
        )
        # Template and provider client must resolve before any GitHub call.
        instructions = load_template(config)
        suggester = build_suggester(config, settings)
    except (ConfigError, ImportError) as e:
        raise click.UsageError(str(e))

    try:
        result = run_suggestions(settings, config, suggester=suggester, instructions=instructions)
    except PRQAError as e:
        raise click.ClickException(str(e))

    if dry_run or not set_output(config["output_name"], result.body):
        click.echo(result.body)

    if result.degraded:
        console.print(f"[yellow]Wrote fallback comment (attempted model: {result.model}).[/yellow]")
    else:
        console.print(
            f"[green]QA suggestions ready: {result.files_analyzed} of {result.files_total} file(s), "
            f"model {result.model}.[/green]"
        )
