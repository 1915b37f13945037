"""
Main entry point for the Fair Dice Duel console game.
Usage: python main.py 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3
"""

import asyncio
import logging
import sys

from fairdice import config
from fairdice.console import ConsoleSession
from fairdice.engine.definitions import build_pool
from fairdice.engine.errors import FairDiceError
from fairdice.engine.game import GameOrchestrator

logger = logging.getLogger(__name__)


async def run_match(args: list[str]) -> int:
    try:
        pool = build_pool(args)
    except FairDiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    async with ConsoleSession() as session:
        try:
            await GameOrchestrator(pool, session).play()
        except Exception as e:
            logger.exception("Match failed")
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = sys.argv[1:] if argv is None else argv
    try:
        return asyncio.run(run_match(args))
    except KeyboardInterrupt:
        print("\nBye.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
