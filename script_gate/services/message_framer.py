"""
Message framing: splits one raw message into signature text and script.

Wire format is ``<base64 signature>\\n<script bytes>``. The framer works on a
single message as delivered by one transport read; a message split across
several reads is not reassembled.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from ..models.request import (
    MAX_MESSAGE_SIZE,
    MAX_SIGNATURE_SIZE,
    MIN_SIGNATURE_SIZE,
    FramingError,
    SignedScript,
    VerificationOutcome,
)


class MessageFramer:
    """Parses raw messages into SignedScript requests."""

    def __init__(self, min_signature_size: int = MIN_SIGNATURE_SIZE,
                 max_signature_size: int = MAX_SIGNATURE_SIZE,
                 max_message_size: int = MAX_MESSAGE_SIZE):
        self.min_signature_size = min_signature_size
        self.max_signature_size = max_signature_size
        self.max_message_size = max_message_size
        self.logger = logging.getLogger(__name__)

    def frame(self, raw: bytes, sequence: int) -> SignedScript:
        """
        Split a raw message at its first newline.

        Args:
            raw: The message bytes from one transport read
            sequence: Request number, used for logging

        Returns:
            SignedScript with its outcome reset to INVALID

        Raises:
            FramingError: If the message is empty, too large, has no newline,
                or its signature text length is out of bounds
        """
        if not raw:
            raise FramingError("The received message is empty")

        if len(raw) > self.max_message_size:
            raise FramingError(
                f"The received message is too large ({len(raw)} > {self.max_message_size} bytes)"
            )

        newline = raw.find(b"\n")
        if newline < 0:
            raise FramingError("Cannot parse the signature from the message")

        signature_size = newline
        if not self.min_signature_size <= signature_size <= self.max_signature_size:
            raise FramingError(f"Signature size in the message (size = {signature_size}) is not acceptable")

        script_size = len(raw) - signature_size - 1
        signed_script = SignedScript(
            sequence=sequence,
            signature=bytes(raw[:signature_size]),
            script=bytes(raw[signature_size + 1:signature_size + 1 + script_size]),
            outcome=VerificationOutcome.INVALID
        )

        self.logger.debug(f"Script #{sequence} is parsed successfully")
        self.logger.debug(f"Size of the received message is {len(raw)}")
        self.logger.debug(f"Size of the signature is {signed_script.signature_size}")
        self.logger.debug(f"Signature: {signed_script.signature.decode('ascii', errors='replace')}")
        self.logger.debug(f"Size of the script is {signed_script.script_size}")
        self.logger.debug(f"Script: {signed_script.script.decode('utf-8', errors='replace')}")
        return signed_script


class RequestBuffer:
    """
    Holds the single in-flight request.

    Each acquisition frames a brand new SignedScript whose outcome starts as
    INVALID, and the slot is cleared when the request is done, so a result
    can never carry over to the next request.
    """

    def __init__(self, framer: Optional[MessageFramer] = None):
        self.framer = framer or MessageFramer()
        self.current: Optional[SignedScript] = None

    @contextmanager
    def acquire(self, raw: bytes, sequence: int) -> Iterator[SignedScript]:
        """Frame a raw message for the duration of one request."""
        if self.current is not None:
            raise RuntimeError("A request is already in flight")

        self.current = self.framer.frame(raw, sequence)
        try:
            yield self.current
        finally:
            self.current.outcome = VerificationOutcome.INVALID
            self.current = None
