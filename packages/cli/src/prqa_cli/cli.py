"""CLI entry point for prqa.

Commands:
  suggest  — generate QA test suggestions for a pull request
  init     — write .prqa.yml and a GitHub Actions workflow
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prqa_cli.commands.init import init_cmd
from prqa_cli.commands.suggest import suggest_cmd


def _configure_logging(verbose: bool) -> None:
    # Logs go to stderr so stdout stays clean for the comment body in dry runs.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prqa"),
    prog_name="prqa",
)
@click.option(
    "--config",
    "config_path",
    default=".prqa.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRQA_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """LLM-generated QA test suggestions for GitHub pull requests."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(suggest_cmd)
main.add_command(init_cmd)
