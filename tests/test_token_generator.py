import math
from collections import Counter

import pytest

from app.application.services.token_generator import TokenGenerator
from app.core.exceptions import InvalidRequestException
from app.domain.models.credential import Credential


def test_generates_requested_length_from_alphabet():
    token = TokenGenerator().generate(32)
    assert len(token) == 32
    assert set(token) <= set(TokenGenerator.ALPHABET)


def test_recuperation_token_fits_its_column():
    token = TokenGenerator().generate_recuperation_token()
    assert len(token) == 10
    assert len(token) == Credential.__table__.c.recuperation_tkn.type.length
    assert set(token) <= set(TokenGenerator.ALPHABET)


@pytest.mark.parametrize("length", [0, -3])
def test_rejects_non_positive_length(length):
    with pytest.raises(InvalidRequestException):
        TokenGenerator().generate(length)


def test_characters_are_uniform_within_five_sigma():
    generator = TokenGenerator()
    tokens, length = 10_000, 10
    counts = Counter("".join(generator.generate(length) for _ in range(tokens)))

    draws = tokens * length
    p = 1 / len(TokenGenerator.ALPHABET)
    expected = draws * p
    sigma = math.sqrt(draws * p * (1 - p))
    assert set(counts) == set(TokenGenerator.ALPHABET)
    for symbol, count in counts.items():
        assert abs(count - expected) <= 5 * sigma, symbol


def test_tokens_do_not_repeat():
    generator = TokenGenerator()
    tokens = {generator.generate(10) for _ in range(500)}
    assert len(tokens) == 500
