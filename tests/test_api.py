import unittest
from unittest.mock import MagicMock, patch

from openai import OpenAIError

from howto_cli.api import (
    CommandGenerationError,
    CommandGenerator,
    SYSTEM_MESSAGE,
    extract_command,
)
from howto_cli.config import Config


def _response(*contents):
    """Builds a fake chat completion with one choice per content string."""
    response = MagicMock()
    choices = []
    for content in contents:
        choice = MagicMock()
        choice.message.content = content
        choices.append(choice)
    response.choices = choices
    return response


class TestExtractCommand(unittest.TestCase):
    """Test cases for pulling the command out of the model's answer."""

    def test_extracts_and_trims(self):
        self.assertEqual(extract_command("<command>\n  ls -la  \n</command>"), "ls -la")

    def test_ignores_surrounding_text(self):
        content = "Sure, here you go:\n<command>\ndu -sh *\n</command>\nHope that helps."
        self.assertEqual(extract_command(content), "du -sh *")

    def test_no_command_answer(self):
        self.assertIsNone(extract_command("<no_command/>"))

    def test_missing_closing_tag(self):
        self.assertIsNone(extract_command("<command>\nls\n"))

    def test_closing_tag_before_opening_tag(self):
        self.assertIsNone(extract_command("</command> oops <command>ls"))

    def test_first_pair_wins(self):
        content = "<command>pwd</command><command>ls</command>"
        self.assertEqual(extract_command(content), "pwd")


@patch("howto_cli.api.OpenAI")
class TestCommandGenerator(unittest.TestCase):
    """Test cases for the CommandGenerator class."""

    def _generator(self):
        return CommandGenerator(api_key="sk-test", model="gpt-test", max_tokens=256, temperature=0.0)

    def test_client_is_created_without_retries(self, mock_openai):
        self._generator()
        mock_openai.assert_called_once_with(api_key="sk-test", max_retries=0)

    def test_generate_command_success(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = _response("<command>\ncd ~\n</command>")

        command = self._generator().generate_command("  go to my home directory \n")

        self.assertEqual(command, "cd ~")
        create.assert_called_once()
        kwargs = create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-test")
        self.assertEqual(kwargs["max_tokens"], 256)
        self.assertEqual(kwargs["temperature"], 0.0)
        self.assertEqual(kwargs["messages"], [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": "<action>\ngo to my home directory\n</action>"},
        ])

    def test_uses_last_choice(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = _response("<command>first</command>", "<command>last</command>")

        self.assertEqual(self._generator().generate_command("anything"), "last")

    def test_request_failure(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.side_effect = OpenAIError("connection reset")

        with self.assertRaises(CommandGenerationError) as ctx:
            self._generator().generate_command("list files")

        self.assertEqual(str(ctx.exception), "Unable to generate command. OpenAI request failed.")
        self.assertIsInstance(ctx.exception.__cause__, OpenAIError)

    def test_no_choices(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = _response()

        with self.assertRaises(CommandGenerationError) as ctx:
            self._generator().generate_command("list files")

        self.assertEqual(str(ctx.exception), "Unable to generate command. No response from model.")

    def test_no_command_from_model(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = _response("<no_command/>")

        with self.assertRaises(CommandGenerationError) as ctx:
            self._generator().generate_command("make me a sandwich")

        self.assertEqual(str(ctx.exception), "No command could be generated for the action.")

    def test_misordered_tags_from_model(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = _response("</command>\nls\n<command>")

        with self.assertRaises(CommandGenerationError) as ctx:
            self._generator().generate_command("list files")

        self.assertEqual(str(ctx.exception), "No command could be generated for the action.")

    def test_empty_content(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = _response(None)

        with self.assertRaises(CommandGenerationError):
            self._generator().generate_command("list files")

    def test_from_config(self, mock_openai):
        config = MagicMock(spec=Config)
        config.get_api_key.return_value = "sk-config"
        config.model = "gpt-config"
        config.max_tokens = 1024
        config.temperature = 0.0

        generator = CommandGenerator.from_config(config)

        mock_openai.assert_called_once_with(api_key="sk-config", max_retries=0)
        self.assertEqual(generator.model, "gpt-config")
        self.assertEqual(generator.max_tokens, 1024)


if __name__ == "__main__":
    unittest.main()
