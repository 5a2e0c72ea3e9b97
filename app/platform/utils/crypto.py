import hashlib
import json
from typing import Any, Dict, Optional

from jose import jwe
from jose.exceptions import JWEError

from app.platform.config import settings


def _key_bytes(secret: Optional[str] = None) -> bytes:
    # dir + A256GCM needs exactly 32 bytes of key material
    return hashlib.sha256((secret or settings.INTEGRATION_ENCRYPTION_KEY).encode("utf-8")).digest()


def encrypt_credentials(credentials: Dict[str, Any], secret: Optional[str] = None) -> str:
    """Seal a credential dict as a compact JWE token."""
    payload = json.dumps(credentials, separators=(",", ":")).encode("utf-8")
    token = jwe.encrypt(payload, _key_bytes(secret), algorithm="dir", encryption="A256GCM")
    return token.decode("utf-8") if isinstance(token, bytes) else token


def decrypt_credentials(token: str, secret: Optional[str] = None) -> Dict[str, Any]:
    """
    Open a token produced by ``encrypt_credentials``.

    Raises:
        ValueError: If the token is malformed or was sealed with another key
    """
    try:
        plaintext = jwe.decrypt(token, _key_bytes(secret))
    except JWEError as e:
        raise ValueError(f"Unable to decrypt integration credentials: {e}") from e
    if plaintext is None:
        raise ValueError("Unable to decrypt integration credentials")
    return json.loads(plaintext)
