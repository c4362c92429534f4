"""
Password hashing for imported accounts.

Imported users receive a placeholder credential; only its PBKDF2 hash is
stored, in the ``pbkdf2_sha256$<iterations>$<salt>$<hash>`` format.
"""

from __future__ import annotations

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 260_000
KEY_LENGTH = 32


def _kdf(salt: str, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt.encode("utf-8"),
        iterations=iterations,
    )


def hash_password(password: str, *, iterations: int = DEFAULT_ITERATIONS, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = _kdf(salt, iterations).derive(password.encode("utf-8"))
    encoded = base64.b64encode(digest).decode("ascii")
    return f"{ALGORITHM}${iterations}${salt}${encoded}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algorithm, iterations, salt, encoded = password_hash.split("$", 3)
    except ValueError:
        return False
    if algorithm != ALGORITHM or not iterations.isdigit():
        return False
    try:
        expected = base64.b64decode(encoded, validate=True)
        _kdf(salt, int(iterations)).verify(password.encode("utf-8"), expected)
    except (InvalidKey, ValueError, binascii.Error):
        return False
    return True
