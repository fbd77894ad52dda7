import logging

import uvicorn
from dotenv import load_dotenv

from hotcold.shared.config import settings

load_dotenv()

logger = logging.getLogger("main")


def main():
    from hotcold.api.server import app

    logger.info(f"Starting HotCold on {settings.HOST}:{settings.PORT}...")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
