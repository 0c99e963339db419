import os
import logging
import sys
import json
from datetime import datetime
from typing import Dict, Any, Optional

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    data = getattr(record, 'data', None)
    return data if isinstance(data, dict) else {}


class ContextFormatter(logging.Formatter):
    """
    Plain-text formatter that appends the context attached by
    log_with_context as `key=value` pairs.

    The generation summary reads e.g.
    `--- Generation Summary --- data_types=3 methods=3 output_dir=generated files=models.json,...`
    """

    def __init__(self):
        super().__init__(PLAIN_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if not context:
            return line

        pairs = []
        for key, value in context.items():
            if isinstance(value, (list, tuple)):
                value = ','.join(os.path.basename(str(v)) for v in value)
            pairs.append(f"{key}={value}")
        return f"{line} {' '.join(pairs)}"


class StructuredLogFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def __init__(self, include_timestamp: bool = True, include_level: bool = True):
        """
        Initialize the structured log formatter.

        Args:
            include_timestamp (bool): Whether to include timestamp in logs
            include_level (bool): Whether to include log level in logs
        """
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        log_data = {}

        if self.include_timestamp:
            log_data['timestamp'] = datetime.fromtimestamp(record.created).isoformat()

        if self.include_level:
            log_data['level'] = record.levelname

        log_data['logger'] = record.name
        # Pipeline stage: generator, segmenter, inference, emitter, snapshot, ...
        log_data['stage'] = record.module
        log_data['message'] = record.getMessage()

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Context keys never overwrite the fixed ones
        for key, value in _context(record).items():
            log_data.setdefault(key, value)

        return json.dumps(log_data, ensure_ascii=False)


class LoggerFactory:
    """Factory class for creating configured loggers."""

    @staticmethod
    def create_logger(name: str,
                      level: int = logging.INFO,
                      output_file: Optional[str] = None,
                      console_output: bool = True,
                      structured: bool = False,
                      log_dir: str = "logs") -> logging.Logger:
        """
        Create and configure a logger.

        Args:
            name (str): Logger name
            level (int): Logging level
            output_file (str, optional): File to write logs to
            console_output (bool): Whether to output logs to stderr, keeping
                stdout free for generated output
            structured (bool): Whether to use structured JSON logging
            log_dir (str): Directory for log files

        Returns:
            logging.Logger: Configured logger
        """
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Clear existing handlers
        logger.handlers = []

        formatter = StructuredLogFormatter() if structured else ContextFormatter()

        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if output_file:
            os.makedirs(log_dir, exist_ok=True)

            file_path = os.path.join(log_dir, output_file)
            file_handler = logging.FileHandler(file_path)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, context: Dict[str, Any]) -> None:
    """
    Log a message with additional context data.

    ContextFormatter appends the context as `key=value` pairs;
    StructuredLogFormatter merges it into the JSON object.

    Args:
        logger (logging.Logger): Logger to use
        level (int): Logging level (e.g. logging.INFO)
        msg (str): Log message
        context (dict): Additional context data
    """
    if logger.isEnabledFor(level):
        logger.log(level, msg, extra={'data': context})
