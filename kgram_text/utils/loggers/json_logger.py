from datetime import datetime
import os
import logging
import json
import sys


class JsonLogger(logging.Formatter):
    """
    Renders each log record as one JSON object per line.

    Structured fields passed as ``extra={"metrics": {...}}`` are nested under
    ``metrics``. Values json cannot encode (numpy scalars, paths) are written
    with ``str``.
    """

    def format(self, record):
        entry = {
            # Time the record was created, not the time it was formatted
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
            'function': record.funcName,
            'process': record.process
        }

        metrics = getattr(record, 'metrics', None)
        if metrics is not None:
            entry['metrics'] = metrics

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(entry, default=str)


def setup_log_file(log_file_path):
    """
    Make sure the directory of a log file exists.

    Args:
        log_file_path (str): Path to the log file

    Returns:
        str: Path to the log file, moved to the temp directory when its
        own directory cannot be created
    """
    log_dir = os.path.dirname(log_file_path)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir, exist_ok=True)
        except OSError as e:
            print(f"Error creating log directory {log_dir}: {e}", file=sys.stderr)
            log_file_path = os.path.join(
                '/tmp', os.path.basename(log_file_path))

    return log_file_path


def get_logger(logger_name, log_file=None, clear_existing=True, console_json=True,
               stream=None):
    """
    Get a configured logger instance with JSON formatting.

    Args:
        logger_name (str): Name for the logger
        log_file (str, optional): Path to the log file
        clear_existing (bool): Whether to clear existing handlers
        console_json (bool): Whether to use JSON formatting for console output
        stream (file, optional): Console stream, standard error by default so
            log records never interleave with generated text on standard output

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)

    if clear_existing and logger.handlers:
        logger.handlers.clear()

    # If logger already has handlers, return it
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setLevel(logging.INFO)

    if console_json:
        console_handler.setFormatter(JsonLogger())
    else:
        console_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)

    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = setup_log_file(log_file)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonLogger())
        logger.addHandler(file_handler)

    return logger


def log_json(logger, message, data=None):
    """
    Log a message with optional JSON data.

    Args:
        logger (logging.Logger): Logger instance
        message (str): Log message
        data (dict, optional): Data to include in the log
    """
    if data is None:
        logger.info(message)
    else:
        logger.info(message, extra={"metrics": data})
