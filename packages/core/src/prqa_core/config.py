from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import yaml

from prqa_core.errors import ConfigError

DEFAULT_CONFIG: dict = {
    "provider": "openai",
    "template": "focused",  # built-in name ("full", "focused") or a path to a Markdown file
    "max_files": 30,
    "max_patch_chars": 4000,
    "preferred_models": None,  # None = use the provider's built-in preference list
    "default_model": None,  # None = use the provider's built-in default
    "timeout": 60.0,  # seconds, applied to both the GitHub and the LLM client
    "output_name": "body",
}

BUILTIN_TEMPLATES_DIR = Path(__file__).parent / "templates"

# Credential variable per provider. GITHUB_TOKEN, PR_NUMBER and REPO are shared.
API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


@dataclass(frozen=True)
class Settings:
    """Everything a run needs from the environment, validated once at startup.

    Built by load_settings() and passed explicitly to every component so no
    module reads os.environ on its own after startup.
    """

    api_key: str
    github_token: str
    pr_number: int
    owner: str
    repo_name: str

    @property
    def repo(self) -> str:
        return f"{self.owner}/{self.repo_name}"


def load_config(config_path: str = ".prqa.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prqa.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a YAML mapping.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if config["provider"] not in API_KEY_ENV:
        raise ConfigError(f"Unknown provider: {config['provider']!r}. Choose 'openai' or 'anthropic'.")

    for key in ("max_files", "max_patch_chars"):
        value = config[key]
        # bool is an int subclass; "max_files: yes" is a typo, not a bound.
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"{key} must be a positive integer, got {value!r}")

    timeout = config["timeout"]
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f"timeout must be a positive number of seconds, got {timeout!r}")

    return config


def _require(environ: Mapping[str, str], name: str) -> str:
    value = (environ.get(name) or "").strip()
    if not value:
        raise ConfigError(f"Missing {name}")
    return value


def parse_pr_number(raw: str) -> int:
    try:
        number = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"PR_NUMBER must be a positive integer, got {raw!r}")
    if number <= 0:
        raise ConfigError(f"PR_NUMBER must be a positive integer, got {raw!r}")
    return number


def split_repo(raw: str) -> tuple[str, str]:
    owner, sep, name = raw.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ConfigError(f"REPO must be in owner/name format, got {raw!r}")
    return owner, name


def load_settings(
    provider: str = "openai",
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[dict] = None,
) -> Settings:
    """Resolve and validate the four required values.

    ``overrides`` holds values supplied on the command line (keys matching
    the environment variable names); non-empty overrides win over the
    environment. Raises ConfigError naming the first missing or malformed
    value, before any network call is made.
    """
    env = dict(os.environ if environ is None else environ)
    for key, value in (overrides or {}).items():
        if value is not None and str(value).strip():
            env[key] = str(value)

    try:
        key_env = API_KEY_ENV[provider]
    except KeyError:
        raise ConfigError(f"Unknown provider: {provider!r}. Choose 'openai' or 'anthropic'.")

    api_key = _require(env, key_env)
    github_token = _require(env, "GITHUB_TOKEN")
    pr_number = parse_pr_number(_require(env, "PR_NUMBER"))
    owner, repo_name = split_repo(_require(env, "REPO"))

    return Settings(
        api_key=api_key,
        github_token=github_token,
        pr_number=pr_number,
        owner=owner,
        repo_name=repo_name,
    )


def load_template(config: dict) -> str:
    """
    Load the instruction part of the prompt.

    ``template`` may name a built-in variant (``full`` or ``focused``) or point
    to a Markdown file relative to the current directory.
    """
    name = config.get("template") or DEFAULT_CONFIG["template"]

    builtin = BUILTIN_TEMPLATES_DIR / f"{name}.md"
    if "/" not in name and builtin.exists():
        return builtin.read_text(encoding="utf-8")

    p = Path(name)
    if not p.exists():
        raise ConfigError(f"Prompt template not found: {name}")
    return p.read_text(encoding="utf-8")
