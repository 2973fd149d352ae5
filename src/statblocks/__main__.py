from pathlib import Path
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from statblocks.infrastructure.local_bestiary_provider import BestiaryDatasetError
from statblocks.presentation.cli import main as cli_main

load_dotenv()


def _configure_logging() -> None:
    level = os.getenv("STATBLOCKS_LOG_LEVEL")
    if not level:
        return
    logging.basicConfig(level=level.strip().upper(), format="%(levelname)s %(name)s: %(message)s")


def main() -> int:
    _configure_logging()
    try:
        return cli_main()
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except (BestiaryDatasetError, FileNotFoundError, ValueError) as exc:
        print(f"Could not resolve the creature: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
