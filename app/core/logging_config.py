# app/core/logging_config.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging once for the whole process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO, which drowns the pipeline milestones
    logging.getLogger("httpx").setLevel(logging.WARNING)
