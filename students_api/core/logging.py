# students_api/core/logging.py
import logging
import sys

LOGGER_NAME = "students_api"


# Configure standard Python logging
def setup_logging(level: str = "INFO") -> logging.Logger:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)  # Print logs to console
        ]
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger
