from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    return SIGNATURE_PREFIX + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the raw request body."""
    if not signature or not secret:
        return False
    return hmac.compare_digest(signature.encode(), compute_signature(body, secret).encode())
