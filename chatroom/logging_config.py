import logging
import sys

FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure the ``chatroom`` logger once; later calls only change the level."""
    logger = logging.getLogger("chatroom")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return logger  # already configured
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(FORMAT))
    logger.addHandler(handler)
    # the http client logs every request at INFO
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return logger
