# testssl/storage/files.py
"""
Output directory handling and PEM file writing.
Provides:
 - prepare_dir(path) -> True if the directory was created, False if it existed
 - write_issued(directory, name, issued) -> (cert_path, key_path)
"""
import os

from testssl.common.config import Issued
from testssl.common.errors import OutputError

CERT_SUFFIX = ".pem"
KEY_SUFFIX = ".key"
CERT_MODE = 0o644
KEY_MODE = 0o600


def prepare_dir(path: str) -> bool:
    try:
        os.makedirs(path)
        return True
    except FileExistsError:
        if not os.path.isdir(path):
            raise OutputError(f"{path} exists and is not a directory")
        return False
    except OSError as e:
        raise OutputError(f"Could not create directory {path}: {e}") from e


def _write(path: str, text: str, mode: int):
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "w") as f:
            f.write(text)
        # O_CREAT mode is ignored for existing files
        os.chmod(path, mode)
    except OSError as e:
        raise OutputError(f"Unable to write file {path}: {e}") from e


def write_issued(directory: str, name: str, issued: Issued):
    """Write <name>.pem (certificate) and <name>.key (private key) into directory."""
    cert_path = os.path.join(directory, name + CERT_SUFFIX)
    key_path = os.path.join(directory, name + KEY_SUFFIX)
    _write(cert_path, issued.cert_pem, CERT_MODE)
    _write(key_path, issued.key_pem, KEY_MODE)
    return cert_path, key_path
