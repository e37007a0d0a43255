"""
CLI 테스트 (click CliRunner)
"""
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from llm_testgen.cli import cli
from llm_testgen.main import TestGenerationResult

GO_SOURCE = "package sample\n\nfunc sum(a, b int) int {\n    return a + b\n}\n\nfunc main() {}\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def go_project(tmp_path):
    (tmp_path / "sample.go").write_text(GO_SOURCE)
    return tmp_path


class TestGenerateCommand:
    """generate 명령 테스트"""

    def test_dry_run_without_api_key(self, runner, clean_env, go_project):
        result = runner.invoke(cli, ["generate", str(go_project), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Tests to generate" in result.output
        assert not (go_project / "sample_test.go").exists()

    def test_missing_api_key(self, runner, clean_env, go_project):
        result = runner.invoke(cli, ["generate", str(go_project)])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output

    def test_options_override_config(self, runner, config, go_project):
        with patch("llm_testgen.cli.TestGenerator") as mock_generator:
            mock_generator.return_value.generate.return_value = TestGenerationResult()

            result = runner.invoke(cli, [
                "generate", str(go_project),
                "--language", "python",
                "--model", "gpt-4o",
                "--max-lines", "40",
            ])

        assert result.exit_code == 0, result.output
        used_config = mock_generator.call_args.args[0]
        assert used_config.app.languages == ["python"]
        assert used_config.openai.model == "gpt-4o"
        assert used_config.app.max_function_lines == 40
        mock_generator.return_value.generate.assert_called_once_with(go_project, dry_run=False)

    def test_errors_set_exit_code(self, runner, config, go_project):
        failed = TestGenerationResult()
        failed.errors.append("Error parsing file: broken.go")

        with patch("llm_testgen.cli.TestGenerator") as mock_generator:
            mock_generator.return_value.generate.return_value = failed
            result = runner.invoke(cli, ["generate", str(go_project)])

        assert result.exit_code == 1


class TestOtherCommands:
    """list-functions / check-config 명령 테스트"""

    def test_list_functions(self, runner, clean_env, go_project):
        result = runner.invoke(cli, ["list-functions", str(go_project)])

        assert result.exit_code == 0, result.output
        assert "sum" in result.output

    def test_check_config_missing_key(self, runner, clean_env):
        result = runner.invoke(cli, ["check-config"])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output

    def test_check_config_ok(self, runner, config):
        result = runner.invoke(cli, ["check-config"])

        assert result.exit_code == 0, result.output
        assert "sk-test-" in result.output
        assert "sk-test-key-0123456789" not in result.output

    def test_default_model_notice_is_shown(self, runner, config):
        result = runner.invoke(cli, ["check-config"])

        assert result.exit_code == 0, result.output
        assert "GPT_MODEL not set" in result.output

    def test_log_level_option_hides_notice(self, runner, config):
        result = runner.invoke(cli, ["--log-level", "WARNING", "check-config"])

        assert result.exit_code == 0, result.output
        assert "GPT_MODEL not set" not in result.output
