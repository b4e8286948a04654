"""Share identifier generation."""

import secrets

# 18 random bytes -> 24 URL-safe characters, 144 bits of entropy.
SHARE_ID_BYTES = 18


def generate_share_id() -> str:
    """Opaque, URL-safe, unguessable id. It doubles as a read capability."""
    return secrets.token_urlsafe(SHARE_ID_BYTES)
