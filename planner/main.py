import logging

import uvicorn

from planner.api.api_run import app
from planner.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL, DEBUG


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, log_level="debug" if DEBUG else "info")


if __name__ == "__main__":
    main()
