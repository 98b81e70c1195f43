"""
Helpers that generate keys, certificates and signatures for the tests.
"""
import base64
from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID


CODE_SIGNING = [ExtendedKeyUsageOID.CODE_SIGNING]


def create_key(kind="ec"):
    """Generate a private key: 'ec' (P-256), 'rsa' (2048) or 'ed25519'."""
    if kind == "rsa":
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)
    if kind == "ed25519":
        return ed25519.Ed25519PrivateKey.generate()
    return ec.generate_private_key(ec.SECP256R1())


def create_certificate(private_key, common_name="Test Code Signer", issuer_key=None,
                       digital_signature=True, key_usage=True, extended_key_usage=CODE_SIGNING,
                       key_cert_sign=False):
    """
    Create a certificate for private_key.

    The certificate is signed by issuer_key when given, otherwise it is
    self-signed. Pass key_usage=False or extended_key_usage=None to leave the
    extension out.
    """
    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Test Org"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    now = datetime.now(timezone.utc)

    builder = x509.CertificateBuilder().subject_name(
        name
    ).issuer_name(
        name
    ).public_key(
        private_key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now - timedelta(days=1)
    ).not_valid_after(
        now + timedelta(days=365)
    )

    if key_usage:
        builder = builder.add_extension(
            x509.KeyUsage(
                digital_signature=digital_signature,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=key_cert_sign,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )

    if extended_key_usage is not None:
        builder = builder.add_extension(
            x509.ExtendedKeyUsage(extended_key_usage),
            critical=False,
        )

    signing_key = issuer_key or private_key
    algorithm = None if isinstance(signing_key, ed25519.Ed25519PrivateKey) else hashes.SHA256()
    return builder.sign(signing_key, algorithm)


def create_duplicate_key_usage_certificate(private_key, common_name="Repeated Key Usage"):
    """
    Create a self-signed RSA certificate that carries Key Usage twice.

    The builder refuses repeated extensions, so a copy of Key Usage is added
    under a placeholder OID of the same encoded length, the OID bytes are
    patched in the TBS and the result is signed again.
    """
    placeholder = x509.ObjectIdentifier("2.5.29.99")
    certificate = create_certificate(private_key, common_name=common_name)
    key_usage = certificate.extensions.get_extension_for_class(x509.KeyUsage).value
    builder = x509.CertificateBuilder(
        issuer_name=certificate.issuer,
        subject_name=certificate.subject,
        public_key=certificate.public_key(),
        serial_number=certificate.serial_number,
        not_valid_before=certificate.not_valid_before_utc,
        not_valid_after=certificate.not_valid_after_utc,
        extensions=list(certificate.extensions),
    ).add_extension(x509.UnrecognizedExtension(placeholder, key_usage.public_bytes()), critical=False)
    template = builder.sign(private_key, hashes.SHA256())

    tbs = template.tbs_certificate_bytes
    patched_tbs = tbs.replace(b"\x06\x03\x55\x1d\x63", b"\x06\x03\x55\x1d\x0f")
    signature = private_key.sign(patched_tbs, padding.PKCS1v15(), hashes.SHA256())
    der = template.public_bytes(serialization.Encoding.DER)
    der = der.replace(tbs, patched_tbs).replace(template.signature, signature)
    return x509.load_der_x509_certificate(der)


def write_certificate(directory, filename, certificate, encoding="pem"):
    """Write a certificate to directory/filename as PEM or DER and return the path."""
    path = directory / filename
    if encoding == "der":
        path.write_bytes(certificate.public_bytes(serialization.Encoding.DER))
    else:
        path.write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    return path


def sign_script(private_key, script: bytes) -> bytes:
    """Sign script with SHA-256 and return the base64 signature text."""
    if isinstance(private_key, rsa.RSAPrivateKey):
        signature = private_key.sign(script, padding.PKCS1v15(), hashes.SHA256())
    elif isinstance(private_key, ed25519.Ed25519PrivateKey):
        signature = private_key.sign(script)
    else:
        signature = private_key.sign(script, ec.ECDSA(hashes.SHA256()))
    return base64.b64encode(signature)


def build_message(signature_text: bytes, script: bytes) -> bytes:
    """Assemble a wire message."""
    return signature_text + b"\n" + script
