import logging

import uvicorn

from ..config import Config, setup_logging

logger = logging.getLogger(__name__)


def main():
    setup_logging()
    logger.info(f"Starting token info API on http://{Config.HOST}:{Config.PORT}")
    uvicorn.run(
        "tokeninfo.core.api:app",
        host=Config.HOST,
        port=Config.PORT,
        log_level=Config.LOG_LEVEL.lower(),
    )


if __name__ == '__main__':
    main()
