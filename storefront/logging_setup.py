# storefront/logging_setup.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    """Attach a single stream handler to the ``storefront`` logger namespace."""
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger("storefront")
    logger.setLevel(level)

    # create_app may run many times (tests); keep one handler
    if not any(getattr(h, "_storefront", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._storefront = True
        logger.addHandler(handler)
    return logger
