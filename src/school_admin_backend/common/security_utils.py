'''
Password hashing, kept apart from the services to prevent circular imports.
'''
import hashlib

from passlib.context import CryptContext

# --- Password Hashing ---
class HashedPassword:
    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
    @classmethod
    def verify(cls, plain_password: str, hashed_password: str) -> bool:
        return cls.pwd_context.verify(plain_password, hashed_password)

    @classmethod
    def get_hash(cls, password: str) -> str:
        return cls.pwd_context.hash(password)

    @staticmethod
    def fingerprint(hashed_password: str) -> str:
        """
        Short digest of a stored hash. Reset links carry it, so a link stops
        working as soon as the password it was issued for has changed.
        """
        return hashlib.sha256(hashed_password.encode("utf-8")).hexdigest()[:16]
