# src/ncdu_view/logging_config.py

import logging
import logging.config
import os
import sys
from typing import Union


def setup_logging(
    log_directory: str,
    base_logger_name: str = "ncdu_view",
    level: Union[int, str] = logging.INFO,
    log_file_name: str = "ncdu_view.log",
    console_output: bool = True,
    json_format: bool = False,
):
    """
    Configure logging for the service.

    Args:
        log_directory: Directory for the log files; created if missing.
        base_logger_name: The application's base logger name.
        level: Minimum level for the console and file handlers.
        log_file_name: Name of the main log file.
        console_output: Whether to also log to stdout.
        json_format: Write the main log file as JSON lines instead of plain text.
    """
    os.makedirs(log_directory, exist_ok=True)
    log_file_path = os.path.join(log_directory, log_file_name)

    if isinstance(level, str):
        numeric_level = getattr(logging, level.upper(), logging.INFO)
    else:
        numeric_level = level

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'color_console': {
                '()': 'colorlog.ColoredFormatter',
                'format': '%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s%(reset)s',
                'datefmt': '%Y-%m-%d %H:%M:%S',
                'log_colors': {
                    'DEBUG':    'cyan',
                    'INFO':     'green',
                    'WARNING':  'yellow',
                    'ERROR':    'red',
                    'CRITICAL': 'bold_red',
                }
            },
            'json': {
                '()': 'pythonjsonlogger.json.JsonFormatter',
                'format': '%(asctime)s %(levelname)s %(name)s %(message)s'
            }
        },
        'handlers': {
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': numeric_level,
                'formatter': 'json' if json_format else 'standard',
                'filename': log_file_path,
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf8'
            },
            'console': {
                'class': 'logging.StreamHandler',
                'level': numeric_level,
                'formatter': 'color_console',
                'stream': sys.stdout
            },
            'error_file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': logging.ERROR,
                'formatter': 'standard',
                'filename': os.path.join(log_directory, 'ncdu_view_error.log'),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 2,
                'encoding': 'utf8'
            }
        },
        'loggers': {
            base_logger_name: {
                'handlers': ['file', 'error_file'],
                'level': numeric_level,
                'propagate': False
            },
            'uvicorn': {
                'handlers': ['file', 'error_file'],
                'level': numeric_level,
                'propagate': False
            },
            'uvicorn.error': {
                'handlers': ['file', 'error_file'],
                'level': numeric_level,
                'propagate': False
            },
            'uvicorn.access': {
                'handlers': ['file', 'error_file'],
                'level': numeric_level,
                'propagate': False
            }
        },
        'root': {
            'handlers': ['file', 'error_file'],
            'level': logging.ERROR,  # Keep root at ERROR to avoid noise
        }
    }

    if console_output:
        for name in (base_logger_name, 'uvicorn', 'uvicorn.error', 'uvicorn.access'):
            LOGGING_CONFIG['loggers'][name]['handlers'].append('console')
        LOGGING_CONFIG['root']['handlers'].append('console')

    logging.config.dictConfig(LOGGING_CONFIG)

    # Only silence chatty libraries when not debugging
    if numeric_level > logging.DEBUG:
        for logger_name in ('httpx', 'httpcore', 'asyncio', 'multipart'):
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    main_logger = logging.getLogger(base_logger_name)
    main_logger.info(f"Logging configured successfully. Level: {logging.getLevelName(numeric_level)}")
    main_logger.debug(f"Log file: {log_file_path}")
