"""Logging setup for the API process."""

from logging.config import dictConfig

from .config.settings import Settings, get_settings


def build_logging_config(settings: Settings) -> dict:
    formatter = 'json' if settings.log_format == 'json' else 'default'
    handlers = {
        'console': {
            'level': settings.log_level,
            'class': 'logging.StreamHandler',
            'formatter': formatter,
        },
    }
    if settings.log_file:
        handlers['file'] = {
            'level': settings.log_level,
            'class': 'logging.FileHandler',
            'filename': settings.log_file,
            'formatter': formatter,
        }

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {
                'format': '[%(asctime)s: %(levelname)s/%(name)s] %(message)s',
            },
            'json': {
                'class': 'pythonjsonlogger.json.JsonFormatter',
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s'
            }
        },
        'handlers': handlers,
        'root': {
            'level': settings.log_level,
            'handlers': list(handlers),
        },
    }


def configure_logging(settings: Settings = None) -> None:
    """Configure root logging from settings (level, text or JSON lines, optional file)."""
    dictConfig(build_logging_config(settings or get_settings()))
