import logging
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli
from .ui import print_error

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # 128 + SIGINT


def _run(argv: Optional[List[str]]) -> int:
    try:
        return run_cli(argv)
    except KeyboardInterrupt:
        logger.info("Interrupted before a command was printed")
        print("\nCancelled.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.exception("howto failed unexpectedly")
        print_error(str(e))
        return EXIT_FAILURE


def main(argv: Optional[List[str]] = None):
    """Console-script entry point: seeds the environment from .env, then runs howto."""
    load_dotenv(find_dotenv(usecwd=True))
    sys.exit(_run(argv))


if __name__ == "__main__":
    main()
