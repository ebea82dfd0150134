"""Tests for the suggestion pipeline: format_comment and run_suggestions."""

import types
from unittest.mock import MagicMock

import pytest
from github import GithubException

from prqa_core.config import DEFAULT_CONFIG, Settings
from prqa_core.errors import ContextFetchError
from prqa_core.providers.base import FALLBACK_HEADER, REMEDIATION_STEPS, BaseSuggester, Completion
from prqa_core.providers.openai import OpenAISuggester
from prqa_core.runner import COMMENT_HEADER, DISCLAIMER, build_suggester, format_comment, run_suggestions

SETTINGS = Settings(api_key="key", github_token="tok", pr_number=42, owner="acme", repo_name="widgets")


def make_file(filename, patch="@@ -1 +1 @@\n-a\n+b"):
    return types.SimpleNamespace(filename=filename, status="modified", additions=1, deletions=1, patch=patch)


def make_repo(n_files):
    pr = MagicMock()
    pr.title = "Add checkout flow"
    pr.user.login = "octocat"
    pr.base.ref = "main"
    pr.head.ref = "feature/checkout"
    pr.html_url = "https://github.com/acme/widgets/pull/42"
    pr.get_files.return_value = [make_file(f"src/file_{i}.py") for i in range(n_files)]
    repo = MagicMock()
    repo.get_pull.return_value = pr
    return repo


class StubSuggester(BaseSuggester):
    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(self, available=("gpt-4.1",), output="Test plan: ...", error=None):
        super().__init__(preferred_models=["gpt-5", "gpt-4.1-mini", "gpt-4.1"])
        self.available = available
        self.output = output
        self.error = error
        self.prompts = []

    def _list_models(self):
        return self.available

    def _call_api(self, model, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.output


def _config(**overrides):
    return {**DEFAULT_CONFIG, **overrides}


# ---------------------------------------------------------------------------
# format_comment
# ---------------------------------------------------------------------------


class TestFormatComment:
    def test_success_layout(self):
        body = format_comment(Completion(text="Test plan: ...", model="gpt-4.1"), 2, 2)
        assert body == (
            f"{COMMENT_HEADER}\n\n{DISCLAIMER}\n\nTest plan: ...\n\n"
            "<sub>Files analyzed: 2 (of 2)</sub>\n<sub>Model: gpt-4.1</sub>"
        )

    def test_degraded_names_attempted_model(self):
        completion = Completion(text="fallback", model="gpt-5", degraded=True, reason="x")
        body = format_comment(completion, 30, 45)
        assert "<sub>Files analyzed: 30 (of 45)</sub>" in body
        assert body.endswith("<sub>Attempted model: gpt-5</sub>")
        assert "<sub>Model:" not in body


# ---------------------------------------------------------------------------
# run_suggestions — end to end with fakes
# ---------------------------------------------------------------------------


class TestRunSuggestions:
    def test_small_pr_success(self):
        suggester = StubSuggester()
        result = run_suggestions(SETTINGS, _config(), repo_obj=make_repo(2), suggester=suggester)

        assert "Test plan: ..." in result.body
        assert "Files analyzed: 2 (of 2)" in result.body
        assert "Model: gpt-4.1" in result.body
        assert result.model == "gpt-4.1"
        assert result.degraded is False
        assert (result.files_analyzed, result.files_total) == (2, 2)

    def test_prompt_contains_pr_and_files(self):
        suggester = StubSuggester()
        run_suggestions(SETTINGS, _config(), repo_obj=make_repo(2), suggester=suggester)

        (prompt,) = suggester.prompts
        assert "PR title: Add checkout flow" in prompt
        assert "1. src/file_0.py (modified) +1/-1" in prompt
        assert "QA focus for this PR" in prompt

    def test_full_template_used_when_configured(self):
        suggester = StubSuggester()
        run_suggestions(SETTINGS, _config(template="full"), repo_obj=make_repo(1), suggester=suggester)
        assert "High-risk areas" in suggester.prompts[0]

    def test_given_instructions_skip_template_lookup(self, mocker):
        mock_load = mocker.patch("prqa_core.runner.load_template")
        suggester = StubSuggester()
        run_suggestions(
            SETTINGS,
            _config(template="nope/missing.md"),
            repo_obj=make_repo(1),
            suggester=suggester,
            instructions="Only list edge cases.",
        )
        mock_load.assert_not_called()
        assert suggester.prompts[0].startswith("Only list edge cases.")

    def test_large_pr_footer(self):
        suggester = StubSuggester()
        result = run_suggestions(SETTINGS, _config(), repo_obj=make_repo(45), suggester=suggester)

        assert "Files analyzed: 30 (of 45)" in result.body
        assert "src/file_29.py" in suggester.prompts[0]
        assert "src/file_30.py" not in suggester.prompts[0]

    def test_completion_failure_degrades(self):
        suggester = StubSuggester(error=RuntimeError("insufficient_quota"))
        result = run_suggestions(SETTINGS, _config(), repo_obj=make_repo(2), suggester=suggester)

        assert result.degraded is True
        assert FALLBACK_HEADER in result.body
        assert "- insufficient_quota" in result.body
        for step in REMEDIATION_STEPS:
            assert step in result.body
        assert "Attempted model: gpt-4.1" in result.body
        assert "Files analyzed: 2 (of 2)" in result.body

    def test_model_listing_failure_uses_default(self):
        class _NoListing(StubSuggester):
            def _list_models(self):
                raise RuntimeError("401")

        result = run_suggestions(SETTINGS, _config(), repo_obj=make_repo(1), suggester=_NoListing())
        assert "Model: gpt-4o-mini" in result.body

    def test_pr_fetch_failure_is_fatal(self):
        repo = MagicMock()
        repo.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)
        suggester = StubSuggester()

        with pytest.raises(ContextFetchError):
            run_suggestions(SETTINGS, _config(), repo_obj=repo, suggester=suggester)
        assert suggester.prompts == []

    def test_opens_repo_when_not_given(self, mocker):
        mock_get_repo = mocker.patch("prqa_core.runner.get_repo", return_value=make_repo(1))
        run_suggestions(SETTINGS, _config(timeout=15.0), suggester=StubSuggester())
        mock_get_repo.assert_called_once_with("acme/widgets", "tok", 15.0)

    def test_builds_suggester_from_config(self, mocker):
        mocker.patch("prqa_core.runner.get_repo", return_value=make_repo(1))
        stub = StubSuggester()
        mock_factory = mocker.patch("prqa_core.runner.build_suggester", return_value=stub)

        run_suggestions(SETTINGS, _config())

        mock_factory.assert_called_once()
        assert len(stub.prompts) == 1


class TestBuildSuggester:
    def test_openai(self, mocker):
        mocker.patch("prqa_core.providers.openai.OpenAI")
        suggester = build_suggester(_config(preferred_models=["gpt-4.1"], default_model="gpt-4o"), SETTINGS)
        assert isinstance(suggester, OpenAISuggester)
        assert suggester.preferred_models == ["gpt-4.1"]
        assert suggester.default_model == "gpt-4o"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_suggester(_config(provider="mystery"), SETTINGS)
