"""Run the server: ``python -m filehost``."""
import logging

import uvicorn

from filehost.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("filehost.main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    main()
