"""
Request models: the framed signed script and its verification outcome.
"""
from dataclasses import dataclass
from enum import Enum


MIN_SIGNATURE_SIZE = 32
MAX_SIGNATURE_SIZE = 4096
MAX_SCRIPT_SIZE = 8192
MAX_MESSAGE_SIZE = MAX_SIGNATURE_SIZE + MAX_SCRIPT_SIZE + 1


class VerificationOutcome(Enum):
    """Result of verifying a signed script against the trust store."""
    VALID = "valid"
    INVALID = "invalid"
    ERROR = "error"
    # Reserved for certificate-level validation failures; never produced yet.
    BAD_CERTIFICATE = "bad_certificate"


class FramingError(ValueError):
    """Raised when a raw message cannot be split into signature and script."""


@dataclass
class SignedScript:
    """One framed request: base64 signature text plus the script it covers."""
    sequence: int
    signature: bytes = b""
    script: bytes = b""
    outcome: VerificationOutcome = VerificationOutcome.INVALID

    @property
    def signature_size(self) -> int:
        return len(self.signature)

    @property
    def script_size(self) -> int:
        return len(self.script)

    @property
    def is_verified(self) -> bool:
        """True only when the verifier marked this exact request as valid."""
        return self.outcome is VerificationOutcome.VALID
