import logging
import sys

import uvicorn

from sunpulse.core.config import settings
from sunpulse.main import create_app

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def main():
    logger.info(f"Starting {settings.PROJECT_NAME} on {settings.HOST}:{settings.PORT or '(auto)'}")
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
