"""CLI entry point."""

import asyncio
import os
import sys
from pathlib import Path

from common.config import Config
from common.logging_config import setup_logging
from cli.context import TransferContext
from cli.repl import repl_loop, show_sign_in_required


def main() -> None:
    """Entry point for CLI."""
    log_level = 'DEBUG' if '--debug' in sys.argv else os.getenv('LOG_LEVEL', 'INFO')

    logger = setup_logging('cli', log_level=log_level)
    for component in ('transfer', 'common'):
        setup_logging(component, log_level=log_level)

    if '--debug' in sys.argv:
        logger.info("Debug logging enabled")
        sys.argv.remove('--debug')

    config = Config(Path.home() / '.flaredrive' / 'config.json')

    async def run() -> None:
        ctx = TransferContext.create(config, on_redirect=show_sign_in_required)
        await repl_loop(ctx)

    logger.info("CLI starting...")
    try:
        asyncio.run(run())
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()
