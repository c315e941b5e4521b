"""
Password hashing helpers (bcrypt).
"""

import bcrypt


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    if not password:
        raise ValueError("Password is empty")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Return True if password matches password_hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
