"""Process entry point: configure logging and serve the API."""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from .app import create_app
from .config import get_settings

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error("Missing or invalid environment variables:")
        logger.error(str(e))
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level.upper())
    app = create_app(settings)
    # lifespan="on": a failed startup (no database) exits the process
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
