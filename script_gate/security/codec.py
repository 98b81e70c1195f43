"""
Base64 codec for detached script signatures.
"""
import base64
import binascii
import logging


logger = logging.getLogger(__name__)

_WHITESPACE = b" \t\r\n\v\f"


class CodecError(ValueError):
    """Raised when signature text cannot be decoded into signature bytes."""


def decode_signature(signature_text: bytes) -> bytes:
    """
    Decode standard base64 signature text into raw signature bytes.

    ASCII whitespace is ignored; any other character outside the base64
    alphabet, or bad padding, is an error.

    Raises:
        CodecError: If the text does not decode, or decodes to nothing
    """
    cleaned = bytes(signature_text).translate(None, _WHITESPACE)
    try:
        decoded = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"Decoding signature failed: {e}") from e

    if len(decoded) <= 0:
        raise CodecError("Decoding signature produced no bytes")

    logger.debug(f"Decoded signature of {len(decoded)} bytes")
    return decoded


def encode_signature(signature: bytes) -> bytes:
    """Encode raw signature bytes as base64 signature text."""
    return base64.b64encode(signature)
