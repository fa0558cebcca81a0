"""Password hashing strategy, injected wherever credentials are checked."""

from typing import Protocol

from passlib.context import CryptContext


class PasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, plaintext: str, digest: str) -> bool:
        ...


class BcryptPasswordHasher:
    """bcrypt via passlib; digests are 60 characters."""

    def __init__(self, context: CryptContext | None = None):
        self.context = context or CryptContext(schemes=["bcrypt"], deprecated="auto")

    def hash(self, plaintext: str) -> str:
        return self.context.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        return self.context.verify(plaintext, digest)
