from passlib.context import CryptContext
import secrets
import string

SHARE_HASH_ALPHABET = string.ascii_letters + string.digits


class PasswordHasher:
    """Salted bcrypt hashing of user passwords."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError):
            # Unparseable stored hash
            return False


def generate_share_hash(length: int = 10) -> str:
    return "".join(secrets.choice(SHARE_HASH_ALPHABET) for _ in range(length))
