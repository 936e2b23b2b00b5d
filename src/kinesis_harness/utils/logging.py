"""Structured logging setup for the harness."""

import logging
import json
import sys
from datetime import datetime, timezone

from ..config.settings import LoggingConfig

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'exc_info', 'exc_text', 'stack_info', 'lineno', 'funcName',
    'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'message'
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Extra fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Text formatter with colors for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_colors: bool = True, stream=None):
        super().__init__()
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
        level = record.levelname

        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level}{self.COLORS['RESET']}"

        # Format: timestamp [LEVEL] logger: message
        formatted = f"{timestamp} [{level}] {record.name}: {record.getMessage()}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def setup_logging(config: LoggingConfig, service_name: str = "kinesis-harness") -> None:
    """
    Setup logging configuration for the harness.

    Args:
        config: Logging configuration
        service_name: Name attached to every record as ``service``
    """
    if config.output.lower() == 'stdout':
        handler = logging.StreamHandler(sys.stdout)
    elif config.output.lower() == 'stderr':
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(config.output)

    if config.format.lower() == 'json':
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter(stream=getattr(handler, 'stream', None))

    handler.setFormatter(formatter)

    class ServiceContextFilter(logging.Filter):
        def filter(self, record):
            record.service = service_name
            return True

    handler.addFilter(ServiceContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Reduce noise from the AWS SDK
    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={config.level}, format={config.format}, "
        f"output={config.output}, service={service_name}"
    )
