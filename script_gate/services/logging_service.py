"""
Logging setup for the script verification gate.
"""
import json
import logging
import logging.handlers
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict


CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class LogEntry:
    """Structured log entry for JSON logging."""
    timestamp: str
    level: str
    logger_name: str
    message: str
    module: str
    function: str
    line_number: int
    process_id: int
    extra_data: Optional[Dict[str, Any]] = None
    exception_info: Optional[Dict[str, Any]] = None


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created).isoformat(),
            level=record.levelname,
            logger_name=record.name,
            message=record.getMessage(),
            module=record.module,
            function=record.funcName,
            line_number=record.lineno,
            process_id=record.process,
            extra_data=getattr(record, 'extra_data', None)
        )

        if record.exc_info:
            log_entry.exception_info = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': traceback.format_exception(*record.exc_info)
            }

        return json.dumps(asdict(log_entry), default=str)


class LoggingService:
    """Configures the root logger from the application config."""

    def __init__(self, config):
        """Initialize logging service with configuration."""
        self.config = config
        self.handlers = []
        self._setup_logging()
        self.logger = logging.getLogger(__name__)
        self.logger.debug("Debug logging enabled")

    def _setup_logging(self):
        """Replace root handlers with console and optional JSON file handlers."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        log_level = getattr(logging, self.config.effective_log_level, logging.INFO)
        root_logger.setLevel(log_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(log_level)
        self.handlers.append(console_handler)

        if self.config.log_file_path:
            log_path = Path(self.config.log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            json_formatter = JSONFormatter()

            file_handler = logging.handlers.RotatingFileHandler(
                filename=str(log_path),
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setFormatter(json_formatter)
            file_handler.setLevel(log_level)
            self.handlers.append(file_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                filename=str(log_path.with_suffix('.errors.log')),
                maxBytes=5 * 1024 * 1024,  # 5MB
                backupCount=3,
                encoding='utf-8'
            )
            error_handler.setFormatter(json_formatter)
            error_handler.setLevel(logging.ERROR)
            self.handlers.append(error_handler)

        for handler in self.handlers:
            root_logger.addHandler(handler)

    def log_with_context(self, level: str, message: str, **context):
        """Log message with additional context data."""
        logger = logging.getLogger('script_gate')
        log_method = getattr(logger, level.lower(), logger.info)
        log_method(message, extra={'extra_data': context})

    def close(self):
        """Detach and close the handlers installed by this service."""
        root_logger = logging.getLogger()
        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers = []
