import argparse
import logging
from typing import List, Optional

from . import HowtoError, __version__
from .api import CommandGenerator
from .config import get_config
from .logger import setup_logging
from .ui import print_command, print_error

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Builds the argument parser for the howto command."""
    parser = argparse.ArgumentParser(
        prog="howto",
        description="Get a shell command for a high-level action, e.g. howto \"find files larger than 1GB\".",
        epilog="Pipe the output to a shell to run it: howto \"show my public IP\" | sh",
    )
    parser.add_argument(
        "action",
        metavar="ACTION",
        type=str,
        help="The high-level action you would like to get a CLI command for.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    Runs the howto command.

    Args:
        argv: Command-line arguments, defaulting to sys.argv[1:].

    Returns:
        The process exit code.
    """
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
        if args.verbose:
            config.verbose = True
        setup_logging(config)
        logger.info(f"Generating command for action: {args.action!r}")

        generator = CommandGenerator.from_config(config)
        command = generator.generate_command(args.action)
    except HowtoError as e:
        logger.info(f"Command generation failed: {e}")
        print_error(str(e))
        return 1

    print_command(command)
    return 0
