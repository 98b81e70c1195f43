"""
Signature verifier: checks a signed script against every trust anchor.
"""
import logging
from typing import Iterable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa

from ..models.request import SignedScript, VerificationOutcome
from ..models.trust import TrustAnchor, TrustStore
from .codec import CodecError, decode_signature


class VerifierSetupError(Exception):
    """Raised when an anchor's key cannot be used for digest verification at all."""


def resolve_outcome(votes: Iterable[VerificationOutcome]) -> VerificationOutcome:
    """
    Fold per-anchor votes into one outcome.

    The first VALID vote wins immediately and the remaining votes are not
    consumed. Otherwise INVALID if any anchor gave a definitive negative, and
    ERROR when no anchor answered definitively (including no anchors at all).
    """
    best_so_far = VerificationOutcome.ERROR
    for vote in votes:
        if vote is VerificationOutcome.VALID:
            return VerificationOutcome.VALID
        if vote is VerificationOutcome.INVALID:
            best_so_far = VerificationOutcome.INVALID
    return best_so_far


class SignatureVerifier:
    """Verifies detached script signatures against a trust store."""

    def __init__(self, trust_store: TrustStore, digest: hashes.HashAlgorithm = None):
        """
        Initialize the verifier.

        Args:
            trust_store: Anchors to try, in order
            digest: Digest used for verification (SHA-256 by default)
        """
        self.trust_store = trust_store
        self.digest = digest or hashes.SHA256()
        self.logger = logging.getLogger(__name__)

    def _verify_with_key(self, public_key, signature: bytes, script: bytes) -> None:
        if isinstance(public_key, rsa.RSAPublicKey):
            public_key.verify(signature, script, padding.PKCS1v15(), self.digest)
        elif isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(signature, script, ec.ECDSA(self.digest))
        elif isinstance(public_key, dsa.DSAPublicKey):
            public_key.verify(signature, script, self.digest)
        else:
            # Ed25519/Ed448 keys do not take a separate digest
            raise VerifierSetupError(
                f"{type(public_key).__name__} cannot verify with {self.digest.name}"
            )

    def check_anchor(self, anchor: TrustAnchor, signature: bytes, script: bytes) -> VerificationOutcome:
        """
        Verify the signature with a single anchor.

        Returns:
            VALID on a good signature, INVALID on a definitive mismatch, ERROR
            when the verification could not be carried out for this anchor
        """
        try:
            self._verify_with_key(anchor.public_key(), signature, script)
        except InvalidSignature:
            self.logger.debug(f"The signature cannot be validated with certificate {anchor.label}")
            return VerificationOutcome.INVALID
        except Exception as e:
            self.logger.warning(f"Error occurred while verifying with certificate {anchor.label}: {e}")
            return VerificationOutcome.ERROR

        self.logger.debug(f"The signature is validated under certificate {anchor.label}")
        return VerificationOutcome.VALID

    def verify(self, signed_script: SignedScript) -> VerificationOutcome:
        """
        Verify a framed request against the trust store.

        The request's outcome flag is reset first and set to VALID only when
        an anchor accepts the signature.

        Args:
            signed_script: Framed request holding signature text and script

        Returns:
            VerificationOutcome for the request
        """
        signed_script.outcome = VerificationOutcome.INVALID

        try:
            signature = decode_signature(signed_script.signature)
        except CodecError as e:
            self.logger.error(f"Script #{signed_script.sequence}: {e}")
            return VerificationOutcome.ERROR

        votes = (
            self.check_anchor(anchor, signature, signed_script.script)
            for anchor in self.trust_store
        )
        outcome = resolve_outcome(votes)

        if outcome is VerificationOutcome.VALID:
            signed_script.outcome = VerificationOutcome.VALID
        return outcome
