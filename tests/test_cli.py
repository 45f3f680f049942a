"""Tests for the CLI."""

import json
import os
import pytest
from click.testing import CliRunner

from pin_guard.cli import cli, EXIT_OK, EXIT_FINDINGS, EXIT_ERROR


FIXTURES_ROOT = os.path.join(os.path.dirname(__file__), "fixtures")
SHA = "b4ffde65f46336ab88eb53be808477a3936bae11"

UNPINNED_WORKFLOW = "jobs:\n  build:\n    uses: actions/checkout@v4\n"
PINNED_WORKFLOW = f"jobs:\n  build:\n    uses: actions/checkout@{SHA}\n"


@pytest.fixture
def runner():
    return CliRunner()


def _repo(tmp_path, text, name=".github/workflows/ci.yml"):
    target = tmp_path / name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text)
    return str(tmp_path)


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_exit_1_on_unpinned(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, UNPINNED_WORKFLOW)])
        assert result.exit_code == EXIT_FINDINGS
        assert "actions/checkout@v4 is not pinned to a full length commit SHA." in result.output
        assert "At least one workflow contains an unpinned GitHub Action version." in result.output

    def test_exit_0_on_pinned(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, PINNED_WORKFLOW)])
        assert result.exit_code == EXIT_OK
        assert "No issues were found." in result.output

    def test_exit_0_in_dry_run(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, UNPINNED_WORKFLOW), "--dry-run"])
        assert result.exit_code == EXIT_OK
        assert "[WARNING]" in result.output
        assert "[ERROR" not in result.output

    def test_exit_2_on_bad_path(self, runner):
        result = runner.invoke(cli, ["scan", "/nonexistent/path"])
        assert result.exit_code == EXIT_ERROR
        assert "Error" in result.output

    def test_exit_2_on_invalid_yaml(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, "jobs: [unclosed\n")])
        assert result.exit_code == EXIT_ERROR

    def test_empty_repository(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", str(tmp_path)])
        assert result.exit_code == EXIT_OK

    def test_structural_error_does_not_fail(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, "name: nothing\n")])
        assert result.exit_code == EXIT_OK
        assert "does not contain any jobs, runs or steps" in result.output

    def test_fixture_checkout(self, runner):
        result = runner.invoke(cli, ["scan", FIXTURES_ROOT, "--format", "json"])
        assert result.exit_code == EXIT_FINDINGS
        assert json.loads(result.output)["total"] == 3


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class TestOptions:
    def test_allowlist_flag(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, UNPINNED_WORKFLOW), "--allowlist", "actions/"])
        assert result.exit_code == EXIT_OK
        assert "actions/checkout matched allowlist" in result.output

    def test_action_files_only(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW, name=".github/actions/a/helpers.yml")
        assert runner.invoke(cli, ["scan", root]).exit_code == EXIT_FINDINGS
        assert runner.invoke(cli, ["scan", root, "--action-files-only"]).exit_code == EXIT_OK

    def test_custom_workflows_path(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW, name="ci/pipelines/build.yml")
        assert runner.invoke(cli, ["scan", root]).exit_code == EXIT_OK
        result = runner.invoke(cli, ["scan", root, "--workflows-path", "ci/pipelines"])
        assert result.exit_code == EXIT_FINDINGS

    def test_verbose_flag_accepted(self, runner, tmp_path):
        result = runner.invoke(cli, ["-v", "scan", _repo(tmp_path, PINNED_WORKFLOW)])
        assert result.exit_code == EXIT_OK


# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------

class TestOutputFormats:
    def test_json_output(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, UNPINNED_WORKFLOW), "--format", "json"])
        parsed = json.loads(result.output)
        assert parsed["total"] == 1
        assert parsed["findings"][0]["uses"] == "actions/checkout@v4"

    def test_sarif_output(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, UNPINNED_WORKFLOW), "--format", "sarif"])
        parsed = json.loads(result.output)
        assert parsed["runs"][0]["results"][0]["ruleId"] == "unpinned-action"

    def test_github_output(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", _repo(tmp_path, UNPINNED_WORKFLOW), "--format", "github"])
        lines = result.output.splitlines()
        assert lines[0].startswith("::group::")
        assert "::endgroup::" in lines
        assert any(line.startswith("::error file=") and "line=3" in line for line in lines)

    def test_auto_uses_github_inside_actions(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        result = runner.invoke(cli, ["scan", _repo(tmp_path, PINNED_WORKFLOW)])
        assert result.output.startswith("::group::")


# ---------------------------------------------------------------------------
# Config file and action inputs
# ---------------------------------------------------------------------------

class TestConfigIntegration:
    def test_allowlist_from_config(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW)
        cfg = tmp_path / ".pin-guard.yml"
        cfg.write_text("allowlist:\n  - actions/checkout\n")
        result = runner.invoke(cli, ["scan", root, "--config", str(cfg)])
        assert result.exit_code == EXIT_OK

    def test_config_found_in_root(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW)
        (tmp_path / ".pin-guard.yml").write_text("dry_run: true\n")
        result = runner.invoke(cli, ["scan", root])
        assert result.exit_code == EXIT_OK

    def test_exclude_from_config(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW, name=".github/workflows/legacy.yml")
        (tmp_path / ".pin-guard.yml").write_text("exclude:\n  - '*legacy.yml'\n")
        result = runner.invoke(cli, ["scan", root])
        assert result.exit_code == EXIT_OK

    def test_scalar_exclude_only_drops_matching_files(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW)
        _repo(tmp_path, UNPINNED_WORKFLOW, name=".github/workflows/legacy.yml")
        (tmp_path / ".pin-guard.yml").write_text("exclude: '*legacy.yml'\n")
        result = runner.invoke(cli, ["scan", root, "--format", "json"])
        assert result.exit_code == EXIT_FINDINGS
        files = {f["file_path"] for f in json.loads(result.output)["findings"]}
        assert [os.path.basename(p) for p in files] == ["ci.yml"]

    def test_dry_run_input(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW)
        result = runner.invoke(cli, ["scan", root], env={"INPUT_DRY_RUN": "true"})
        assert result.exit_code == EXIT_OK

    def test_dry_run_input_other_values_enforce(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW)
        result = runner.invoke(cli, ["scan", root], env={"INPUT_DRY_RUN": "yes"})
        assert result.exit_code == EXIT_FINDINGS

    def test_allowlist_input(self, runner, tmp_path):
        root = _repo(tmp_path, UNPINNED_WORKFLOW)
        result = runner.invoke(cli, ["scan", root], env={"INPUT_ALLOWLIST": "other/\nactions/"})
        assert result.exit_code == EXIT_OK

    def test_invalid_config_file(self, runner, tmp_path):
        root = _repo(tmp_path, PINNED_WORKFLOW)
        cfg = tmp_path / ".pin-guard.yml"
        cfg.write_text("allowlist: [unclosed\n")
        result = runner.invoke(cli, ["scan", root, "--config", str(cfg)])
        assert result.exit_code == EXIT_ERROR
        assert "Error loading config" in result.output
