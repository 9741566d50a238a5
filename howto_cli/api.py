import logging
from typing import Dict, List, Optional

from openai import OpenAI, OpenAIError

from . import HowtoError
from .config import Config

# Configure logging
logger = logging.getLogger(__name__)

COMMAND_OPEN_TAG = "<command>"
COMMAND_CLOSE_TAG = "</command>"

SYSTEM_MESSAGE = """
You are an expert Unix system operator. You have intimate and detailed knowledge of CLI tools, both old and new.

When the user asks for a command that accomplishes a high-level action, you respond with a CLI command that accomplishes that action.

Example input:
<action>
go to my home directory
</action>

Example output:
<command>
cd ~
</command>

If the action cannot be accomplished via the CLI, you must respond with:
<no_command/>
"""


class CommandGenerationError(HowtoError):
    """Raised when the model could not produce a command."""


def extract_command(content: str) -> Optional[str]:
    """
    Pulls the text between the first <command> and </command> tags.

    Returns None when either tag is missing, which covers the model's
    <no_command/> answer, or when the closing tag comes first.
    """
    start = content.find(COMMAND_OPEN_TAG)
    end = content.find(COMMAND_CLOSE_TAG)
    if start == -1 or end == -1:
        return None
    start += len(COMMAND_OPEN_TAG)
    if end < start:
        return None
    return content[start:end].strip()


class CommandGenerator:
    """Turns a plain-language action into a shell command using OpenAI chat completions."""

    def __init__(self, api_key: str, model: str, max_tokens: int = 1024, temperature: float = 0.0):
        """
        Initializes the CommandGenerator.

        Args:
            api_key: The OpenAI API key.
            model: The chat model to use.
            max_tokens: Upper bound on the length of the model's answer.
            temperature: Sampling temperature.
        """
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = OpenAI(api_key=api_key, max_retries=0)
        logger.info(f"Initialized OpenAI client with model: {self.model}")

    @classmethod
    def from_config(cls, config: Config) -> "CommandGenerator":
        """Builds a generator from the runtime config, resolving the API key."""
        return cls(
            api_key=config.get_api_key(),
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

    def _build_messages(self, action: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": f"<action>\n{action.strip()}\n</action>"},
        ]

    def generate_command(self, action: str) -> str:
        """
        Generates a shell command for the given action.

        Args:
            action: What the user wants to do, in plain language.

        Returns:
            The shell command, trimmed.

        Raises:
            CommandGenerationError: If the request fails or the model gives no command.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=self._build_messages(action),
            )
        except OpenAIError as e:
            logger.error(f"Error calling OpenAI API: {e}")
            raise CommandGenerationError("Unable to generate command. OpenAI request failed.") from e

        if not response.choices:
            raise CommandGenerationError("Unable to generate command. No response from model.")

        content = response.choices[-1].message.content or ""
        logger.info(f"Model response: {content!r}")

        command = extract_command(content)
        if command is None:
            raise CommandGenerationError("No command could be generated for the action.")
        return command
