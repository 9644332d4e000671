"""
Tests for ui/cli.py - exit codes and stdout discipline of the shaid command.
"""

import io
import json
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from rich.console import Console
from typer.testing import CliRunner

from shaid.core.configs import ProviderKind
from shaid.errors import AuthError, NetworkError, NoCommandExtractedError
from shaid.llmfactory import BACKENDS, LLMFactory
from shaid.ui import config_commands
from shaid.ui.cli import app


class TestCli(unittest.TestCase):
    """Test cases for the generate command."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "config.json"
        self.runner = CliRunner()
        self.env = {"SHAID_CONFIG": str(self.config_path), "OPENAI_API_KEY": "sk-test"}

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _invoke(self, *args):
        return self.runner.invoke(app, list(args), env=self.env)

    def test_prints_only_the_command(self):
        with patch(
            "shaid.core.generator.dispatch", return_value="find . -type f -mtime -7"
        ) as mock_dispatch:
            result = self._invoke("list", "all", "files", "modified", "in", "the", "last", "7", "days")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "find . -type f -mtime -7\n")
        prompt = mock_dispatch.call_args[0][1]
        self.assertEqual(prompt.request, "list all files modified in the last 7 days")

    def test_network_failure_exits_with_network_code(self):
        with patch(
            "shaid.core.generator.dispatch",
            side_effect=NetworkError("Could not reach provider: Connection error."),
        ):
            result = self._invoke("list all files modified in the last 7 days")

        self.assertEqual(result.exit_code, 5)
        self.assertEqual(result.stdout, "")
        self.assertIn("Error (network): Could not reach provider", result.stderr)

    def test_auth_failure_exit_code(self):
        with patch("shaid.core.generator.dispatch", side_effect=AuthError("API key not found.")):
            result = self._invoke("show disk usage")
        self.assertEqual(result.exit_code, 4)

    def test_no_command_exit_code(self):
        with patch(
            "shaid.core.generator.dispatch",
            side_effect=NoCommandExtractedError("I'm sorry, I can't help with that."),
        ):
            result = self._invoke("show disk usage")
        self.assertEqual(result.exit_code, 7)

    def test_malformed_config_exit_code(self):
        self.config_path.write_text("[1, 2")
        with patch("shaid.core.generator.dispatch") as mock_dispatch:
            result = self._invoke("show disk usage")

        self.assertEqual(result.exit_code, 3)
        mock_dispatch.assert_not_called()

    def test_empty_prompt_is_usage_error(self):
        with patch("shaid.core.generator.dispatch") as mock_dispatch:
            result = self._invoke()

        self.assertEqual(result.exit_code, 2)
        mock_dispatch.assert_not_called()

    def test_dry_run_prints_prompt_without_dispatch(self):
        with patch("shaid.core.generator.dispatch") as mock_dispatch:
            result = self._invoke("--dry-run", "show disk usage")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("<request>show disk usage</request>", result.output)
        mock_dispatch.assert_not_called()

    def test_provider_override(self):
        self.env["ANTHROPIC_API_KEY"] = "sk-ant"
        with patch("shaid.core.generator.dispatch", return_value="ls") as mock_dispatch:
            result = self._invoke("-p", "claude", "list files")

        self.assertEqual(result.exit_code, 0, result.output)
        config = mock_dispatch.call_args[0][0]
        self.assertEqual(config.provider.value, "Claude")
        self.assertEqual(config.api_key, "sk-ant")

    def test_base_url_option_enables_custom_provider(self):
        with patch("shaid.core.generator.dispatch", return_value="ls") as mock_dispatch:
            result = self._invoke(
                "-p", "custom",
                "-m", "llama3",
                "--base-url", "http://localhost:11434/v1",
                "list files",
            )

        self.assertEqual(result.exit_code, 0, result.output)
        config = mock_dispatch.call_args[0][0]
        self.assertEqual(config.provider.value, "Custom")
        self.assertEqual(config.base_url, "http://localhost:11434/v1")

    def test_provider_switch_does_not_reuse_stored_endpoint(self):
        self.config_path.write_text(
            json.dumps({"type": "Custom", "baseUrl": "http://localhost:11434/v1"})
        )
        self.env["ANTHROPIC_API_KEY"] = "sk-ant"
        with patch("shaid.core.generator.dispatch", return_value="ls") as mock_dispatch:
            result = self._invoke("-p", "claude", "list files")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIsNone(mock_dispatch.call_args[0][0].base_url)

    def test_config_path_flag(self):
        result = self._invoke("--config-path")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn(str(self.config_path), result.output)

    def test_init_config_flag(self):
        result = self._invoke("--init-config")

        self.assertEqual(result.exit_code, 0, result.output)
        document = json.loads(self.config_path.read_text())
        self.assertEqual(document["type"], "OpenAI")
        self.assertEqual(document["apiKey"], "")

    def test_init_config_keeps_existing_file(self):
        self.config_path.write_text('{"type": "Claude"}')

        result = self._invoke("--init-config")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(self.config_path.read_text()), {"type": "Claude"})

    def test_list_models_flag(self):
        result = self._invoke("--list-models")

        self.assertEqual(result.exit_code, 0, result.output)
        for name in ("OpenAI", "Claude", "Gemini", "Custom"):
            self.assertIn(name, result.output)


class TestListModels(unittest.TestCase):
    """Test cases for config_commands.list_models()."""

    def test_lists_providers_known_to_factory(self):
        factory = LLMFactory({ProviderKind.GEMINI: BACKENDS[ProviderKind.GEMINI]})
        buffer = io.StringIO()

        with patch.object(config_commands, "console", Console(file=buffer, width=200)):
            config_commands.list_models(factory)

        output = buffer.getvalue()
        self.assertIn("Gemini", output)
        self.assertIn("gemini-2.0-flash", output)
        self.assertIn("GOOGLE_API_KEY", output)
        self.assertNotIn("OpenAI", output)


if __name__ == "__main__":
    unittest.main()
