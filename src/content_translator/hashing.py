import hashlib

CONTENT_HASH_LENGTH = 16  # hex chars, 64 bits


def hash_content(text: str) -> str:
    """Return a short, stable SHA-256 fingerprint of the given text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:CONTENT_HASH_LENGTH]
