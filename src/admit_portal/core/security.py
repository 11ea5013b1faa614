"""
Security Utilities

Password hashing and session token helpers.
"""

import hashlib
import hmac
import secrets

import bcrypt

SESSION_TOKEN_BYTES = 32  # 256 bits of entropy when using token_urlsafe


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt."""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against its bcrypt hash."""
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_session_token() -> str:
    """Generate an opaque session token for the cookie."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def hash_session_token(token: str, secret_key: str) -> str:
    """
    Derive the storage key for a session token.

    Tokens are keyed with HMAC-SHA256 so the store never holds the raw
    cookie value.
    """
    return hmac.new(secret_key.encode(), token.encode(), hashlib.sha256).hexdigest()
