"""
Script verification gate: runs scripts only when signed by a trusted
self-signed code-signing certificate.
"""

__version__ = "1.0.0"
