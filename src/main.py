import sys
import logging
from typing import List, Optional

from pydantic import ValidationError

from config import EngineConfig
from engine import LedgerEngine
from errors import LedgerError
from writer import write_snapshots

logger = logging.getLogger(__name__)

USAGE = "Usage: python main.py <input.csv>"


def get_filename(arguments: List[str]) -> str:
    if len(arguments) != 2:
        raise ValueError("Wrong number of arguments")
    return arguments[1]


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv

    try:
        filepath = get_filename(argv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1

    try:
        config = EngineConfig()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = LedgerEngine(config)
    try:
        snapshots = engine.process_file(filepath)
    except (LedgerError, OSError, UnicodeDecodeError) as e:
        logger.debug("Processing aborted", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_snapshots(snapshots, sys.stdout, config.precision)
    return 0


if __name__ == "__main__":
    sys.exit(main())
