"""
Security package: trust policy, certificate store and signature verification.
"""
from .codec import CodecError, decode_signature, encode_signature
from .trust_policy import (
    PolicyDecision,
    RejectionReason,
    evaluate_certificate,
    is_code_signing_eligible,
    is_self_signed,
)
from .certificate_store import load_trust_store, read_certificate
from .signature_verifier import SignatureVerifier, VerifierSetupError, resolve_outcome

__all__ = [
    'CodecError',
    'decode_signature',
    'encode_signature',
    'PolicyDecision',
    'RejectionReason',
    'evaluate_certificate',
    'is_code_signing_eligible',
    'is_self_signed',
    'load_trust_store',
    'read_certificate',
    'SignatureVerifier',
    'VerifierSetupError',
    'resolve_outcome'
]
