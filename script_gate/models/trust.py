"""
Trust anchor models for the certificate store.
"""
import os
from dataclasses import dataclass
from collections.abc import Sequence
from typing import Iterator, Tuple

from cryptography import x509


MAX_FILEPATH_LENGTH = 300
MAX_LABEL_BYTES = 254


def bounded_label(filename: str) -> str:
    """Truncate a filename to MAX_LABEL_BYTES encoded bytes."""
    encoded = os.fsencode(filename)[:MAX_LABEL_BYTES]
    # A multi-byte character cut in half by the bound is dropped.
    return encoded.decode("utf-8", errors="ignore")


@dataclass(frozen=True)
class TrustAnchor:
    """A certificate accepted as a code-signing trust anchor."""
    certificate: x509.Certificate
    label: str

    def public_key(self):
        return self.certificate.public_key()


class TrustStore(Sequence):
    """
    Ordered, read-only collection of trust anchors.

    Order is the directory enumeration order at load time. Duplicates are
    kept. The store has no mutating methods; it is built once and dropped at
    shutdown.
    """

    def __init__(self, anchors=()):
        self._anchors: Tuple[TrustAnchor, ...] = tuple(anchors)

    def __getitem__(self, index):
        return self._anchors[index]

    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[TrustAnchor]:
        return iter(self._anchors)

    def __repr__(self) -> str:
        return f"TrustStore({list(self.labels())!r})"

    def labels(self) -> Tuple[str, ...]:
        """Labels of all anchors, in store order."""
        return tuple(anchor.label for anchor in self._anchors)

    def is_empty(self) -> bool:
        return not self._anchors
