import logging

SUCCESS = 25
LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

logging.addLevelName(SUCCESS, "SUCCESS")


def configure_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    # Keep library chatter out of the run log
    for noisy in ("urllib3", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def success(logger: logging.Logger, msg: str, *args) -> None:
    logger.log(SUCCESS, msg, *args)
