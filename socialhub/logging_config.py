import logging.config

import coloredlogs

FIELD_STYLES = {
    "asctime": {"color": "green"},
    "levelname": {"bold": True, "color": "cyan"},
    "name": {"color": "white"},
    "message": {"color": "white"},
}

LEVEL_STYLES = {
    "DEBUG": {"color": "blue"},
    "INFO": {"color": "green"},
    "WARNING": {"color": "yellow"},
    "ERROR": {"color": "red"},
    "CRITICAL": {"bold": True, "color": "red"},
}

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once per process.

    Streamlit re-executes page scripts on every interaction, so repeated calls
    are ignored after the first one.
    """
    global _configured
    if _configured:
        return

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "colored": {
                "()": coloredlogs.ColoredFormatter,
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                "field_styles": FIELD_STYLES,
                "level_styles": LEVEL_STYLES,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "colored",
            }
        },
        "loggers": {
            "socialhub": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            # httpx logs every backend request at INFO
            "httpx": {"level": "WARNING"},
        },
    }

    logging.config.dictConfig(logging_config)
    _configured = True
