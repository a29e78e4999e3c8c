# testssl/crypto/keys.py
"""
RSA key helpers using cryptography.
Provides:
 - generate_key() -> fresh 2048-bit RSA private key
 - private_key_pem(key) -> PKCS#1 "RSA PRIVATE KEY" PEM text
 - load_private_key(pem) -> private key object
"""
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from testssl.common.config import KEY_SIZE, PUBLIC_EXPONENT
from testssl.common.errors import KeyGenerationError


def generate_key() -> rsa.RSAPrivateKey:
    """
    Generate a new RSA key pair from the OS random source.
    Raises KeyGenerationError if the backend cannot produce one.
    """
    try:
        return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=KEY_SIZE)
    except Exception as e:
        raise KeyGenerationError(f"could not generate RSA key: {e}") from e


def private_key_pem(key: rsa.RSAPrivateKey) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    ).decode()


def load_private_key(pem: str) -> PrivateKeyTypes:
    """Load a PEM-encoded private key (no password)."""
    return serialization.load_pem_private_key(pem.encode(), password=None)
