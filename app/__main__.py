import logging

import uvicorn

from app.core.config import get_settings
from app.core.logging import init_logging


def main() -> None:
    settings = get_settings()
    init_logging(debug=settings.debug)
    logging.getLogger("app").info("Starting HTTP server on port %d...", settings.port)
    # log_config=None keeps the JSON handler installed above
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
