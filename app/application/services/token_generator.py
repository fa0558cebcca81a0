"""Random credential tokens (password recuperation codes)."""

import secrets
import string

from app.core.exceptions import InvalidRequestException
from app.domain.models.credential import RECUPERATION_TOKEN_LENGTH


class TokenGenerator:
    """Uppercase alphanumeric tokens drawn from the OS CSPRNG.

    ``secrets`` reads from the operating system source and is safe to call
    from concurrent threads; there is no fallback to ``random``.
    """

    ALPHABET = string.ascii_uppercase + string.digits

    def generate(self, length: int) -> str:
        if length <= 0:
            raise InvalidRequestException("Token length must be greater than zero")
        return "".join(secrets.choice(self.ALPHABET) for _ in range(length))

    def generate_recuperation_token(self) -> str:
        return self.generate(RECUPERATION_TOKEN_LENGTH)
