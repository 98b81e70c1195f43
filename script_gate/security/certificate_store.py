"""
Certificate store: builds the trust store from a directory of certificates.
"""
import os
import logging
from typing import Optional

from cryptography import x509
from cryptography.hazmat.backends import default_backend

from ..models.trust import MAX_FILEPATH_LENGTH, TrustAnchor, TrustStore, bounded_label
from .trust_policy import evaluate_certificate


logger = logging.getLogger(__name__)


def read_certificate(file_path: str) -> Optional[x509.Certificate]:
    """
    Read a certificate file, trying PEM first and DER second.

    Returns:
        The parsed certificate, or None if the file is unreadable or is
        neither a PEM nor a DER certificate
    """
    try:
        with open(file_path, 'rb') as f:
            data = f.read()
    except OSError as e:
        logger.debug(f"Unable to open certificate file {file_path}: {e}")
        return None

    try:
        return x509.load_pem_x509_certificate(data, default_backend())
    except ValueError:
        pass

    try:
        return x509.load_der_x509_certificate(data, default_backend())
    except ValueError as e:
        logger.debug(f"{file_path} is neither a PEM nor a DER certificate: {e}")
        return None


def _load_anchor(directory_path: str, entry: os.DirEntry) -> Optional[TrustAnchor]:
    """Turn one directory entry into a trust anchor, or None if it is skipped."""
    if not entry.is_file(follow_symlinks=False):
        logger.warning(f"Skipping {entry.name} since it is not a file")
        return None

    file_path = os.path.join(directory_path, entry.name)
    if len(os.fsencode(file_path)) >= MAX_FILEPATH_LENGTH:
        logger.warning(f"Skipping {entry.name} since the full path name is too long")
        return None

    cert = read_certificate(file_path)
    if cert is None:
        logger.warning(f"Skipping {entry.name} since the certificate cannot be read")
        return None

    try:
        decision = evaluate_certificate(cert)
    except Exception as e:
        logger.warning(f"Skipping {entry.name} since the certificate cannot be evaluated: {e}")
        return None

    if not decision.accepted:
        logger.warning(f"Skipping {entry.name} since {decision.reason.value}")
        return None

    return TrustAnchor(certificate=cert, label=bounded_label(entry.name))


def load_trust_store(directory_path: str) -> TrustStore:
    """
    Load all trust anchors from a certificate directory.

    Entries are visited in directory enumeration order, without recursion.
    Unreadable files, non-certificates and certificates refused by the trust
    policy are skipped.

    Args:
        directory_path: Directory holding PEM or DER certificate files

    Returns:
        TrustStore of accepted anchors, possibly empty

    Raises:
        OSError: If the directory itself cannot be opened
    """
    try:
        entries = os.scandir(directory_path)
    except OSError as e:
        logger.error(f"Cannot open certificates directory {directory_path}: {e}")
        raise

    anchors = []
    with entries:
        for entry in entries:
            anchor = _load_anchor(directory_path, entry)
            if anchor is None:
                continue
            anchors.append(anchor)
            logger.info(f"Successfully loaded certificate {anchor.label}")

    logger.info(f"Loaded a total of {len(anchors)} certificates")
    return TrustStore(anchors)
