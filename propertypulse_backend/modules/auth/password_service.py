"""Password hashing for stored user credentials."""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check ``password`` against a stored hash; False for a missing hash."""
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)
