import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO"):
    """Configure root logging once for the whole API"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL echo is controlled by settings.debug, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
