# app/core/security.py
"""
Password hashing and bearer token helpers.

Tokens are handed to clients as "<id>|<secret>". Only the SHA-256 digest of
the secret is stored, so a leaked table does not leak usable tokens.
"""

import hashlib
import hmac
import secrets
from typing import Optional, Tuple

import bcrypt

from app.db.base import parse_row_id


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def generate_token_secret() -> str:
    return secrets.token_hex(20)


def hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def token_matches(secret: str, digest: str) -> bool:
    return hmac.compare_digest(hash_token(secret), digest)


def split_token(raw: str) -> Optional[Tuple[int, str]]:
    """
    Split "<id>|<secret>" into its parts.

    Returns None when the value does not have that shape or the id could not
    name a stored token.
    """
    token_id, sep, secret = raw.partition("|")
    if not sep or not secret:
        return None
    row_id = parse_row_id(token_id)
    if row_id is None:
        return None
    return row_id, secret
