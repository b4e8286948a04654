"""
GitHub token encryption/decryption using Fernet symmetric encryption.
"""

import base64

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from gitdash.core.config import settings


def _get_fernet() -> Fernet:
    key = settings.ENCRYPTION_KEY

    # Anything that is not exactly 32 bytes gets stretched with PBKDF2
    if len(key) != 32:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=b"gitdash_github_token_salt",
            iterations=100000,
        )
        fernet_key = base64.urlsafe_b64encode(kdf.derive(key.encode()))
    else:
        fernet_key = base64.urlsafe_b64encode(key.encode())

    return Fernet(fernet_key)


def encrypt_token(token: str) -> str:
    """
    Encrypt a GitHub token for storage.

    Args:
        token: Plain text token

    Returns:
        Fernet ciphertext as text
    """
    return _get_fernet().encrypt(token.encode()).decode()


def decrypt_token(encrypted_token: str) -> str:
    """
    Decrypt a stored GitHub token.

    Raises:
        ValueError: when the ciphertext was produced with another key
    """
    try:
        return _get_fernet().decrypt(encrypted_token.encode()).decode()
    except InvalidToken as exc:
        raise ValueError("Stored GitHub token cannot be decrypted") from exc
