# testssl/common/utils.py
import datetime
from urllib.parse import urlsplit

from testssl.common.config import FALLBACK_TLD, MAX_DOMAIN_LENGTH
from testssl.common.errors import DomainError

WWW_PREFIX = "www."


def normalize_domain(raw: str, fallback_tld: str = FALLBACK_TLD) -> str:
    """
    Turn user input into the hostname used as CN and DNS name.

      example.com             -> example.com
      example                 -> example.test
      https://www.example.com -> example.com

    Raises DomainError for empty, over-long or unparseable input.
    """
    if not raw:
        raise DomainError("Missing domain name")
    if len(raw) > MAX_DOMAIN_LENGTH:
        raise DomainError(f"Max allowed length for a domain is {MAX_DOMAIN_LENGTH} characters")
    if any(ord(ch) < 0x20 or ord(ch) == 0x7f for ch in raw):
        raise DomainError("Problem with parsing domain name")

    try:
        parts = urlsplit(raw)
        host = parts.hostname or ""
    except ValueError as e:
        raise DomainError("Problem with parsing domain name") from e

    if not host:
        # no scheme://host form, treat the input itself as the name
        if "." in raw:
            host = raw
        else:
            host = f"{raw}.{fallback_tld}"

    if host.startswith(WWW_PREFIX):
        host = host[len(WWW_PREFIX):]

    if not host:
        raise DomainError("Missing domain name")
    if len(host) > MAX_DOMAIN_LENGTH:
        raise DomainError(f"Max allowed length for a domain is {MAX_DOMAIN_LENGTH} characters")
    return host


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def add_years(moment: datetime.datetime, years: int) -> datetime.datetime:
    """Calendar add; Feb 29 rolls over to Mar 1 when the target year is not leap."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, month=3, day=1)
