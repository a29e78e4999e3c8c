# testssl/crypto/serial.py
"""
Certificate serial numbers derived from the hostname.

  serial = sum(code points of hostname) * len(hostname) * R,  R in [1, 100000)

R comes from the OS secure random source and is drawn on every call, so the
root and the leaf of one run get different serials. Nothing is persisted:
collisions across runs are unlikely, not impossible.
"""
import secrets

from testssl.common.config import SERIAL_RANDOM_BOUND


def domain_weight(hostname: str) -> int:
    """Sum of code points times character length."""
    return sum(ord(ch) for ch in hostname) * len(hostname)


def random_factor(bound: int = SERIAL_RANDOM_BOUND) -> int:
    """Uniform integer in [1, bound); zero would make the serial invalid."""
    return secrets.randbelow(bound - 1) + 1


def derive_serial(hostname: str) -> int:
    """Serial for one certificate of `hostname`; a new random factor on every call."""
    if not hostname:
        raise ValueError("hostname must not be empty")
    return domain_weight(hostname) * random_factor()
