"""
Models package for the script verification gate.
"""

from .config import Config, ConfigValidationError, ConfigValidationResult
from .request import (
    MIN_SIGNATURE_SIZE,
    MAX_SIGNATURE_SIZE,
    MAX_SCRIPT_SIZE,
    MAX_MESSAGE_SIZE,
    VerificationOutcome,
    FramingError,
    SignedScript,
)
from .trust import TrustAnchor, TrustStore, bounded_label

__all__ = [
    'Config',
    'ConfigValidationError',
    'ConfigValidationResult',
    'MIN_SIGNATURE_SIZE',
    'MAX_SIGNATURE_SIZE',
    'MAX_SCRIPT_SIZE',
    'MAX_MESSAGE_SIZE',
    'VerificationOutcome',
    'FramingError',
    'SignedScript',
    'TrustAnchor',
    'TrustStore',
    'bounded_label'
]
