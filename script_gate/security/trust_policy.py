"""
Trust policy deciding which certificates qualify as code-signing trust anchors.

A certificate is accepted only when it is self-signed and its Key Usage and
Extended Key Usage extensions both authorize code signing.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID


logger = logging.getLogger(__name__)


class RejectionReason(Enum):
    """Why a certificate was refused as a trust anchor."""
    NOT_SELF_SIGNED = "the certificate is not self-signed"
    NOT_CODE_SIGNING = "the certificate's key usage is not codeSigning"


@dataclass
class PolicyDecision:
    """Outcome of evaluating a certificate against the trust policy."""
    accepted: bool
    reason: Optional[RejectionReason] = None

    @classmethod
    def accept(cls) -> 'PolicyDecision':
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectionReason) -> 'PolicyDecision':
        return cls(accepted=False, reason=reason)


def _verify_own_signature(cert: x509.Certificate) -> None:
    """Verify the certificate signature with its own public key; raise on failure."""
    public_key = cert.public_key()
    signature = cert.signature
    tbs = cert.tbs_certificate_bytes

    if isinstance(public_key, rsa.RSAPublicKey):
        # PKCS1v15 or PSS, as declared by the certificate itself
        public_key.verify(
            signature,
            tbs,
            cert.signature_algorithm_parameters,
            cert.signature_hash_algorithm
        )
    elif isinstance(public_key, ec.EllipticCurvePublicKey):
        public_key.verify(signature, tbs, cert.signature_algorithm_parameters)
    elif isinstance(public_key, dsa.DSAPublicKey):
        public_key.verify(signature, tbs, cert.signature_hash_algorithm)
    elif isinstance(public_key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
        public_key.verify(signature, tbs)
    else:
        raise TypeError(f"Unsupported public key type: {type(public_key).__name__}")


def is_self_signed(cert: x509.Certificate) -> bool:
    """
    Check whether the certificate's signature verifies under its own key.

    Only a definitive positive verification counts. Any failure of the
    verification machinery (unsupported key, mismatched algorithm, malformed
    data) is reported as not self-signed.
    """
    try:
        _verify_own_signature(cert)
        return True
    except InvalidSignature:
        return False
    except Exception as e:
        logger.debug(f"Self-signature check could not complete: {e}")
        return False


def is_code_signing_eligible(cert: x509.Certificate) -> bool:
    """
    Check that Key Usage has digitalSignature and Extended Key Usage has codeSigning.

    Both extensions must be present. Other key usage bits and other purposes
    do not disqualify the certificate.
    """
    try:
        key_usage = cert.extensions.get_extension_for_class(x509.KeyUsage).value
        extended_key_usage = cert.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
    except x509.ExtensionNotFound:
        return False
    except (x509.DuplicateExtension, ValueError) as e:
        # Repeated or unparsable extensions
        logger.debug(f"Cannot read certificate extensions: {e}")
        return False

    if not key_usage.digital_signature:
        return False

    return ExtendedKeyUsageOID.CODE_SIGNING in extended_key_usage


def evaluate_certificate(cert: x509.Certificate) -> PolicyDecision:
    """Evaluate a certificate against both trust policy checks."""
    if not is_self_signed(cert):
        return PolicyDecision.reject(RejectionReason.NOT_SELF_SIGNED)

    if not is_code_signing_eligible(cert):
        return PolicyDecision.reject(RejectionReason.NOT_CODE_SIGNING)

    return PolicyDecision.accept()
