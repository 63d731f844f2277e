"""
Mixtape Backend — Password Hashing
===================================

What:  Hashes and verifies user passwords with Argon2 (memory-hard).
How:   passlib CryptContext with the argon2 scheme (backed by argon2-cffi).
Who:   UserService on signup and on password change.
"""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """Returns an encoded argon2 hash (parameters and salt included)."""
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)
