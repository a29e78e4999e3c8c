# testssl/common/errors.py
"""
Exceptions raised while generating certificates.

Every failure is terminal for the run; testssl.cli.main is the only place
that catches these.
"""


class TestSSLError(Exception):
    """Base class for all testssl failures."""


class DomainError(TestSSLError, ValueError):
    """Domain input is empty, too long or cannot be parsed."""


class KeyGenerationError(TestSSLError):
    """RSA key material could not be generated."""


class SigningError(TestSSLError):
    """Certificate template could not be built or signed."""


class VerificationError(TestSSLError):
    """Signed certificate and key do not form a valid pair / chain."""


class OutputError(TestSSLError):
    """Output directory or PEM file could not be written."""


class ConfigError(TestSSLError):
    """Subject settings taken from the environment are invalid."""
