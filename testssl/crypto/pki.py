# testssl/crypto/pki.py
"""
Root CA and server certificate issuance.

issue_root() self-signs a CA certificate; issue_leaf() signs a server
certificate for the same hostname with the root's key. Both return an
Issued record whose PEM text has already been checked to load as a
matching certificate/key pair.
"""
from typing import Tuple
import ipaddress

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization, hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from testssl.common.config import (
    LEAF_SUBJECT_KEY_ID, VALIDITY_YEARS, Issued, SubjectDefaults,
)
from testssl.common.errors import SigningError, VerificationError
from testssl.common.utils import add_years, utcnow
from testssl.crypto.keys import generate_key, load_private_key, private_key_pem
from testssl.crypto.serial import derive_serial

LOOPBACK_IPS = [ipaddress.ip_address("127.0.0.1"), ipaddress.ip_address("::1")]
TLS_USAGES = [ExtendedKeyUsageOID.CLIENT_AUTH, ExtendedKeyUsageOID.SERVER_AUTH]


def build_subject(common_name: str, defaults: SubjectDefaults = None) -> x509.Name:
    """
    Subject shared by root and server: the configured organization fields,
    CN=<common_name> and emailAddress (1.2.840.113549.1.9.1, IA5String)
    example@<common_name>.
    """
    defaults = defaults or SubjectDefaults()
    return x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, defaults.country),
        x509.NameAttribute(NameOID.STATE_OR_PROVINCE_NAME, defaults.province),
        x509.NameAttribute(NameOID.LOCALITY_NAME, defaults.locality),
        x509.NameAttribute(NameOID.STREET_ADDRESS, defaults.street_address),
        x509.NameAttribute(NameOID.POSTAL_CODE, defaults.postal_code),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, defaults.organization),
        x509.NameAttribute(NameOID.ORGANIZATIONAL_UNIT_NAME, defaults.organizational_unit),
        # hostnames run to 253 characters, past the 64 character CN bound
        x509.NameAttribute(NameOID.COMMON_NAME, common_name, _validate=False),
        x509.NameAttribute(NameOID.EMAIL_ADDRESS, defaults.email_for(common_name)),
    ])


def common_name_of(name: x509.Name) -> str:
    """Return the CN of a subject. Raises ValueError if there is none."""
    attrs = name.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attrs:
        raise ValueError("subject has no Common Name (CN)")
    return attrs[0].value


def encode_pem(cert_der: bytes, key: rsa.RSAPrivateKey) -> Tuple[str, str]:
    """Wrap DER certificate bytes as CERTIFICATE and the key as RSA PRIVATE KEY PEM text."""
    cert = x509.load_der_x509_certificate(cert_der)
    return cert.public_bytes(serialization.Encoding.PEM).decode(), private_key_pem(key)


def verify_key_pair(cert_pem: str, key_pem: str) -> x509.Certificate:
    """
    Check that the PEM certificate and PEM key both load and belong together.
    Returns the parsed certificate. Raises VerificationError otherwise.
    """
    try:
        cert = x509.load_pem_x509_certificate(cert_pem.encode())
        key = load_private_key(key_pem)
    except (ValueError, TypeError) as e:
        raise VerificationError(f"certificate/key do not load: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise VerificationError("private key is not an RSA key")
    cert_pub = cert.public_key()
    if not isinstance(cert_pub, rsa.RSAPublicKey):
        raise VerificationError("certificate public key is not an RSA key")
    if cert_pub.public_numbers() != key.public_key().public_numbers():
        raise VerificationError("private key does not match certificate public key")
    return cert


def verify_signed_by(cert: x509.Certificate, ca_cert: x509.Certificate) -> None:
    """
    Verify that `cert` was issued by `ca_cert`: issuer name matches the CA
    subject and the signature checks out under the CA public key.
    Raises VerificationError on mismatch.
    """
    if cert.issuer != ca_cert.subject:
        raise VerificationError("certificate issuer does not match CA subject")
    try:
        ca_cert.public_key().verify(
            cert.signature,
            cert.tbs_certificate_bytes,
            padding.PKCS1v15(),
            cert.signature_hash_algorithm,
        )
    except InvalidSignature as e:
        raise VerificationError("certificate signature does not verify against CA") from e


def _validity(builder: x509.CertificateBuilder) -> x509.CertificateBuilder:
    now = utcnow()
    return builder.not_valid_before(now).not_valid_after(add_years(now, VALIDITY_YEARS))


def _finish(cert: x509.Certificate, key: rsa.RSAPrivateKey) -> Issued:
    cert_der = cert.public_bytes(serialization.Encoding.DER)
    cert_pem, key_pem = encode_pem(cert_der, key)
    parsed = verify_key_pair(cert_pem, key_pem)
    return Issued(cert_der=cert_der, cert=parsed, key=key, cert_pem=cert_pem, key_pem=key_pem)


def issue_root(subject: x509.Name) -> Issued:
    """
    Create the self-signed root CA for `subject`.

    CA:TRUE, keyUsage digitalSignature+keyCertSign, extKeyUsage
    clientAuth+serverAuth, valid for ten years from now.
    """
    key = generate_key()
    try:
        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)
            .public_key(key.public_key())
            .serial_number(derive_serial(common_name_of(subject)))
            .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
            .add_extension(x509.KeyUsage(
                digital_signature=True, content_commitment=False, key_encipherment=False,
                data_encipherment=False, key_agreement=False, key_cert_sign=True,
                crl_sign=False, encipher_only=False, decipher_only=False,
            ), critical=True)
            .add_extension(x509.ExtendedKeyUsage(TLS_USAGES), critical=False)
            .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        )
        cert = _validity(builder).sign(key, hashes.SHA256())
    except (ValueError, TypeError) as e:
        raise SigningError(f"could not sign root certificate: {e}") from e
    return _finish(cert, key)


def issue_leaf(subject: x509.Name, ca_cert: x509.Certificate, ca_key: rsa.RSAPrivateKey) -> Issued:
    """
    Create a server certificate for the CN of `subject`, signed by the root.

    SAN carries the hostname, its wildcard and the loopback addresses so the
    certificate also works for https://127.0.0.1 and https://[::1].
    """
    key = generate_key()
    try:
        hostname = common_name_of(subject)
        san = x509.SubjectAlternativeName(
            [x509.DNSName(hostname), x509.DNSName("*." + hostname)]
            + [x509.IPAddress(ip) for ip in LOOPBACK_IPS]
        )
        ca_ski = ca_cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value
        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(ca_cert.subject)
            .public_key(key.public_key())
            .serial_number(derive_serial(hostname))
            .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
            .add_extension(x509.KeyUsage(
                digital_signature=True, content_commitment=False, key_encipherment=False,
                data_encipherment=False, key_agreement=False, key_cert_sign=False,
                crl_sign=False, encipher_only=False, decipher_only=False,
            ), critical=True)
            .add_extension(x509.ExtendedKeyUsage(TLS_USAGES), critical=False)
            .add_extension(x509.SubjectKeyIdentifier(LEAF_SUBJECT_KEY_ID), critical=False)
            .add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(ca_ski),
                critical=False,
            )
            .add_extension(san, critical=False)
        )
        cert = _validity(builder).sign(ca_key, hashes.SHA256())
    except (ValueError, TypeError, x509.ExtensionNotFound) as e:
        raise SigningError(f"could not sign server certificate: {e}") from e

    issued = _finish(cert, key)
    verify_signed_by(issued.cert, ca_cert)
    return issued
