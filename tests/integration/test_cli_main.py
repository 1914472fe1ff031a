#!/usr/bin/env python3
"""
Integration tests for CLI Main Entry Point

Tests end-to-end CLI command execution with real command invocation.
"""

import pytest
from click.testing import CliRunner

from splitcheck import __version__
from splitcheck.cli.main import main


@pytest.mark.integration
@pytest.mark.cli
class TestCLIMainIntegration:
    """Test main CLI entry point with real command execution."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_help_command_lists_all_subcommands(self):
        result = self.runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "SplitCheck - Bill Splitting Calculator" in result.output
        for command in ["version", "config", "eval", "settle", "analytics"]:
            assert command in result.output

    def test_version_command_shows_version_info(self):
        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert f"SplitCheck v{__version__}" in result.output
        assert "Author:" in result.output

    def test_config_command_shows_configuration(self):
        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration:" in result.output
        assert "Environment: test" in result.output
        assert "Currency: VND" in result.output
        assert "Precision: 2" in result.output
        assert "Rounding: round" in result.output

    def test_config_reflects_environment(self, monkeypatch):
        monkeypatch.setenv("SPLITCHECK_CURRENCY", "usd")
        monkeypatch.setenv("SPLITCHECK_ROUNDING", "floor")

        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Currency: USD" in result.output
        assert "Rounding: floor" in result.output

    def test_invalid_configuration_is_reported(self, monkeypatch):
        monkeypatch.setenv("SPLITCHECK_PRECISION", "42")

        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output

    def test_verbose_shows_environment(self):
        result = self.runner.invoke(main, ["--verbose", "version"])

        assert result.exit_code == 0
        assert "Environment: test" in result.output
        assert "Data directory:" in result.output

    def test_invalid_command_shows_error(self):
        result = self.runner.invoke(main, ["nonexistent"])

        assert result.exit_code != 0
        assert "No such command" in result.output


@pytest.mark.integration
@pytest.mark.cli
class TestEvalCommand:
    """Test evaluating money expressions from the command line."""

    def setup_method(self):
        self.runner = CliRunner()

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("2*25000", "50.000 VND"),
            ("(120,000 + 30,000) / 3", "50.000 VND"),
            ("10/4", "2,5 VND"),
            ("1/0", "0 VND"),
            ("hello", "0 VND"),
        ],
    )
    def test_formatted(self, expression, expected):
        result = self.runner.invoke(main, ["eval", expression])

        assert result.exit_code == 0
        assert result.output.strip() == expected

    def test_raw(self):
        result = self.runner.invoke(main, ["eval", "--raw", "1,250,000 + 50000"])

        assert result.exit_code == 0
        assert result.output.strip() == "1300000"

    def test_currency_from_environment(self, monkeypatch):
        monkeypatch.setenv("SPLITCHECK_CURRENCY", "USD")

        result = self.runner.invoke(main, ["eval", "10/4"])

        assert result.output.strip() == "$2.50"

    def test_negative_expression_after_separator(self):
        result = self.runner.invoke(main, ["eval", "--", "-5000"])

        assert result.exit_code == 0
        assert result.output.strip() == "-5.000 VND"
