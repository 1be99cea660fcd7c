import base64
import hashlib
import hmac
from typing import Optional


def compute_signature(channel_secret: str, body: bytes) -> str:
    mac = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(mac).decode("utf-8")


def verify_signature(channel_secret: str, body: bytes, signature: Optional[str]) -> bool:
    """Check the X-Line-Signature header against the raw request body."""
    if not channel_secret or not signature:
        return False
    expected = compute_signature(channel_secret, body)
    return hmac.compare_digest(expected, signature)
