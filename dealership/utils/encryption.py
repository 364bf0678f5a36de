"""
Symmetric encryption for rich-text catalog fields.

description and features are stored as Fernet tokens. The Fernet key is
derived from the configured secret so any string can be used as
ENCRYPTION_KEY.
"""

import base64
import hashlib
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


def derive_fernet_key(secret: str) -> bytes:
    """Derive a urlsafe base64 32-byte Fernet key from an arbitrary secret."""
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class FieldCipher:
    """Encrypts and decrypts text columns."""

    def __init__(self, secret: str):
        self._fernet = Fernet(derive_fernet_key(secret))

    def encrypt(self, plaintext: Optional[str]) -> Optional[str]:
        if plaintext is None or plaintext == "":
            return None
        return self._fernet.encrypt(str(plaintext).encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: Optional[str]) -> Optional[str]:
        """
        Decrypt a stored token.

        Returns None when the value is empty or is not a token produced with
        this key (e.g. rows written before encryption was enabled).
        """
        if not ciphertext:
            return None
        try:
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError):
            logger.warning("Could not decrypt stored field value")
            return None
