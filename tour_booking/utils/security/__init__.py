from passlib.context import CryptContext
from passlib.exc import PasswordValueError


BCRYPT_ROUNDS = 12

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt with a fresh salt."""
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except PasswordValueError:
        # bcrypt cannot hash such a secret, so it can never match
        return False
