import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from . import HowtoError

logger = logging.getLogger(__name__)

OPENAI_API_KEY_ENV_VAR = "HOWTO_CLI_OPENAI_API_KEY"
DATA_DIR_ENV_VAR = "HOWTO_CLI_DATA_DIR"
MODEL_ENV_VAR = "HOWTO_CLI_MODEL"
VERBOSE_ENV_VAR = "HOWTO_CLI_VERBOSE"
LOG_DIR_ENV_VAR = "HOWTO_CLI_LOG_DIR"

DEFAULT_DATA_DIR_NAME = ".howto-cli"
CREDENTIALS_FILE = "credentials"

DEFAULT_MODEL = "gpt-4o-2024-08-06"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.0

_TRUTHY = ("1", "true", "yes", "on")


class CredentialsError(HowtoError):
    """Raised when the OpenAI API key cannot be found or read."""


def _env_flag(key: str) -> bool:
    return os.environ.get(key, "").strip().lower() in _TRUTHY


def _default_data_dir() -> str:
    """Returns the data directory, honouring the HOWTO_CLI_DATA_DIR override."""
    data_dir = os.environ.get(DATA_DIR_ENV_VAR)
    if data_dir:
        return data_dir

    home_dir = os.path.expanduser("~")
    if home_dir == "~":
        raise CredentialsError(
            f"Unable to determine home directory. Set the {DATA_DIR_ENV_VAR} environment variable to override."
        )
    return os.path.join(home_dir, DEFAULT_DATA_DIR_NAME)


@dataclass
class Config:
    """Runtime settings for the howto CLI, resolved from the environment."""

    data_dir: str = field(default_factory=_default_data_dir)
    model: str = field(default_factory=lambda: os.environ.get(MODEL_ENV_VAR) or DEFAULT_MODEL)
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    verbose: bool = field(default_factory=lambda: _env_flag(VERBOSE_ENV_VAR))

    credentials_file: str = field(init=False)
    log_dir: str = field(init=False)
    api_key: Optional[str] = field(init=False, default=None, repr=False)

    def __post_init__(self):
        """Post-initialization to set up paths derived from the data directory."""
        self.credentials_file = os.path.join(self.data_dir, CREDENTIALS_FILE)
        self.log_dir = os.environ.get(LOG_DIR_ENV_VAR) or os.path.join(self.data_dir, "logs")

    def get_api_key(self) -> str:
        """
        Resolve the OpenAI API key.

        The HOWTO_CLI_OPENAI_API_KEY environment variable wins when it is set;
        otherwise the key is read from the credentials file in the data directory.

        Returns:
            The API key.

        Raises:
            CredentialsError: If neither source yields a usable key.
        """
        value = os.environ.get(OPENAI_API_KEY_ENV_VAR)
        if value is not None:
            if not value:
                raise CredentialsError(f"The {OPENAI_API_KEY_ENV_VAR} environment variable is empty.")
            logger.info(f"Using OpenAI API key from {OPENAI_API_KEY_ENV_VAR}")
            self.api_key = value
            return value

        try:
            with open(self.credentials_file, "r", encoding="utf-8") as f:
                key = f.read().strip()
        except (IOError, UnicodeDecodeError) as e:
            raise CredentialsError(
                f"Unable to read OpenAI API key from file {self.credentials_file}: {e}"
            ) from e

        if not key:
            raise CredentialsError(f"The credentials file {self.credentials_file} is empty.")

        logger.info(f"Using OpenAI API key from {self.credentials_file}")
        self.api_key = key
        return key

    def __str__(self) -> str:
        """Return string representation of the configuration."""
        config_dict = self.__dict__.copy()
        if self.api_key:
            config_dict['api_key'] = f"{self.api_key[:4]}...{self.api_key[-4:]}" if len(self.api_key) > 8 else "****"
        return str(config_dict)


# Singleton instance holder
_config_instance: Optional[Config] = None

def get_config() -> Config:
    """Returns the singleton Config instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reset_config() -> None:
    """Drops the cached Config so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None
