"""
Services package for the script verification gate.
"""

from .config_service import ConfigService
from .logging_service import LoggingService, JSONFormatter
from .message_framer import MessageFramer, RequestBuffer
from .pipe_transport import PipeTransport, TransportError
from .script_executor import ScriptExecutor, ExecutionResult

__all__ = [
    'ConfigService',
    'LoggingService',
    'JSONFormatter',
    'MessageFramer',
    'RequestBuffer',
    'PipeTransport',
    'TransportError',
    'ScriptExecutor',
    'ExecutionResult'
]
