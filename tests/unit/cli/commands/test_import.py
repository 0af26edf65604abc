"""
Unit tests for the 'import' command.
"""

import json
import logging
from unittest.mock import patch

from click.testing import CliRunner

from conftest import DEPTEST, DEPTEST_V1_REV, FakeSourceProvider
from depconvert.cli.commands.convert import import_command
from depconvert.cli.main import main


def write_vendor_conf(project_dir, content):
    (project_dir / "vendor.conf").write_text(content)


class TestImportCommand:

    @patch("depconvert.cli.commands.convert.GitSourceProvider")
    def test_json_output(self, mock_provider_cls, tmp_path):
        mock_provider_cls.return_value = FakeSourceProvider()
        write_vendor_conf(tmp_path, f"{DEPTEST} {DEPTEST_V1_REV}\n")
        runner = CliRunner()

        result = runner.invoke(import_command, [str(tmp_path), "--root", "github.com/me/project", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["importer"] == "vndr"
        assert payload["manifest"]["constraints"] == [{"name": DEPTEST, "version": "^1.0.0"}]
        assert payload["lock"]["projects"] == [
            {"name": DEPTEST, "version": "v1.0.0", "revision": DEPTEST_V1_REV}
        ]

    @patch("depconvert.cli.commands.convert.GitSourceProvider")
    def test_table_output(self, mock_provider_cls, tmp_path):
        mock_provider_cls.return_value = FakeSourceProvider()
        write_vendor_conf(tmp_path, f"{DEPTEST} {DEPTEST_V1_REV}\n")
        runner = CliRunner()

        result = runner.invoke(import_command, [str(tmp_path), "--root", "github.com/me/project"])

        assert result.exit_code == 0
        assert "Importing vndr" in result.output
        assert "Converted 1 project(s)" in result.output

    @patch("depconvert.cli.commands.convert.GitSourceProvider")
    def test_no_metadata(self, mock_provider_cls, tmp_path):
        mock_provider_cls.return_value = FakeSourceProvider()
        runner = CliRunner()

        result = runner.invoke(import_command, [str(tmp_path), "--root", "github.com/me/project"])

        assert result.exit_code == 1
        assert "No legacy dependency metadata found" in result.output

    @patch("depconvert.cli.commands.convert.GitSourceProvider")
    def test_structural_error_exits_nonzero(self, mock_provider_cls, tmp_path):
        mock_provider_cls.return_value = FakeSourceProvider()
        write_vendor_conf(tmp_path, f"{DEPTEST}\n")
        runner = CliRunner()

        result = runner.invoke(import_command, [str(tmp_path), "--root", "github.com/me/project"])

        assert result.exit_code == 1
        assert "revision is required" in result.output

    @patch("depconvert.cli.commands.convert.GitSourceProvider")
    def test_importer_option_restricts_detection(self, mock_provider_cls, tmp_path):
        mock_provider_cls.return_value = FakeSourceProvider()
        write_vendor_conf(tmp_path, f"{DEPTEST} {DEPTEST_V1_REV}\n")
        runner = CliRunner()

        result = runner.invoke(
            import_command,
            [str(tmp_path), "--root", "github.com/me/project", "--importer", "godep"],
        )

        assert result.exit_code == 1
        assert "Godeps" in result.output

    @patch("depconvert.cli.commands.convert.logging.basicConfig")
    @patch("depconvert.cli.commands.convert.GitSourceProvider")
    def test_warnings_are_shown_once(self, mock_provider_cls, mock_basic_config, tmp_path):
        mock_provider_cls.return_value = FakeSourceProvider()
        write_vendor_conf(tmp_path, f"github.com/nobody/nothing {DEPTEST_V1_REV}\n{DEPTEST} {DEPTEST_V1_REV}\n")
        runner = CliRunner()

        result = runner.invoke(import_command, [str(tmp_path), "--root", "github.com/me/project"])

        assert result.exit_code == 0
        assert mock_basic_config.call_args.kwargs["level"] == logging.ERROR
        assert result.output.count("⚠") == 1
        assert "skipped 1" in result.output

    @patch("depconvert.cli.commands.convert.logging.basicConfig")
    @patch("depconvert.cli.commands.convert.GitSourceProvider")
    def test_verbose_leaves_warnings_to_logging(self, mock_provider_cls, mock_basic_config, tmp_path):
        mock_provider_cls.return_value = FakeSourceProvider()
        write_vendor_conf(tmp_path, f"github.com/nobody/nothing {DEPTEST_V1_REV}\n{DEPTEST} {DEPTEST_V1_REV}\n")
        runner = CliRunner()

        result = runner.invoke(import_command, [str(tmp_path), "--root", "github.com/me/project", "-v"])

        assert result.exit_code == 0
        assert mock_basic_config.call_args.kwargs["level"] == logging.INFO
        assert "⚠" not in result.output

    def test_root_is_required(self, tmp_path):
        runner = CliRunner()

        result = runner.invoke(import_command, [str(tmp_path)])

        assert result.exit_code == 2
        assert "--root" in result.output


def test_main_registers_import():
    runner = CliRunner()

    result = runner.invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "import" in result.output
