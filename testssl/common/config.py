# testssl/common/config.py
import os
from typing import ClassVar, Dict

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from testssl.common.errors import ConfigError

KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537
VALIDITY_YEARS = 10
SERIAL_RANDOM_BOUND = 100000
FALLBACK_TLD = "test"
MAX_DOMAIN_LENGTH = 253
LEAF_SUBJECT_KEY_ID = bytes([1, 2, 3, 4, 6])

OUTPUT_DIR_ENV = "TESTSSL_DIR"
DEFAULT_OUTPUT_DIR = "ssl"


def default_output_dir() -> str:
    return os.environ.get(OUTPUT_DIR_ENV) or DEFAULT_OUTPUT_DIR


class SubjectDefaults(BaseModel):
    """Organizational fields shared by the root and the server subject."""
    model_config = ConfigDict(frozen=True)

    organization: str = "Example Ltd."
    country: str = Field("US", min_length=2, max_length=2)
    province: str = "South Carolina"
    locality: str = "Greenville"
    street_address: str = "150 Cleveland Park Dr"
    postal_code: str = "29601"
    organizational_unit: str = "Development"
    email_local_part: str = "example"

    ENV_PREFIX: ClassVar[str] = "TESTSSL_"

    @classmethod
    def from_env(cls, environ: Dict[str, str] = None) -> "SubjectDefaults":
        """
        Build defaults, overriding any field set as TESTSSL_<FIELD>
        (e.g. TESTSSL_ORGANIZATION, TESTSSL_COUNTRY).
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for name in cls.model_fields:
            value = environ.get(cls.ENV_PREFIX + name.upper())
            if value:
                overrides[name] = value
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigError(f"invalid subject settings from environment: {e}") from e

    def email_for(self, common_name: str) -> str:
        return f"{self.email_local_part}@{common_name}"


class Issued(BaseModel):
    """Result of one issuance: the signed certificate, its key and their PEM text."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    cert_der: bytes
    cert: x509.Certificate
    key: rsa.RSAPrivateKey
    cert_pem: str
    key_pem: str
