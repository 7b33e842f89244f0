#!/usr/bin/env python3
"""FastAPI server runner."""

import uvicorn
import structlog

from trading_signals.config.loader import load_config
from trading_signals.logging.setup import setup_logging

logger = structlog.get_logger()


def main(config_path: str | None = None):
    """Run the FastAPI server with structlog handling uvicorn's output."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)

    # Imported late so TRADING_SIGNALS_CONFIG is honoured by the module-level app
    from trading_signals.api.app import app

    logger.info("Starting FastAPI server", host=config.api.host, port=config.api.port)

    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()
