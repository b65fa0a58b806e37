"""Tests for keepalive_registry.registry.identity — IdentityGenerator."""
from __future__ import annotations

import string

import pytest

from keepalive_registry.registry.identity import (
    IDENTITY_ALPHABET,
    IdentityGenerator,
    is_valid_identity,
)


class TestAlphabet:
    def test_alphabet_has_62_symbols(self) -> None:
        assert len(IDENTITY_ALPHABET) == 62
        assert len(set(IDENTITY_ALPHABET)) == 62

    def test_alphabet_is_digits_and_letters(self) -> None:
        assert set(IDENTITY_ALPHABET) == set(string.digits + string.ascii_letters)


class TestGenerate:
    def test_default_length_is_eight(self) -> None:
        assert len(IdentityGenerator().generate()) == 8

    def test_custom_length(self) -> None:
        assert len(IdentityGenerator(length=12).generate()) == 12

    def test_characters_come_from_alphabet(self) -> None:
        generator = IdentityGenerator()
        for _ in range(200):
            assert all(ch in IDENTITY_ALPHABET for ch in generator.generate())

    def test_random_tokens_vary(self) -> None:
        generator = IdentityGenerator()
        tokens = {generator.generate() for _ in range(100)}
        assert len(tokens) > 90

    def test_injected_source_is_used(self) -> None:
        candidates = iter(["AAAAAAAA", "BBBBBBBB"])
        generator = IdentityGenerator(source=lambda: next(candidates))
        assert generator.generate() == "AAAAAAAA"
        assert generator.generate() == "BBBBBBBB"

    def test_injected_source_with_wrong_shape_raises(self) -> None:
        generator = IdentityGenerator(source=lambda: "short")
        with pytest.raises(ValueError, match="short"):
            generator.generate()

    def test_non_positive_length_rejected(self) -> None:
        with pytest.raises(ValueError):
            IdentityGenerator(length=0)

    def test_capacity(self) -> None:
        assert IdentityGenerator(length=2).capacity == 62 * 62


class TestIsValidIdentity:
    @pytest.mark.parametrize("value", ["abcd1234", "ZZZZZZZZ", "0a1B2c3D"])
    def test_accepts_well_formed(self, value: str) -> None:
        assert is_valid_identity(value)

    @pytest.mark.parametrize("value", ["", "abc", "abcd12345", "abcd-123", "abcd 123"])
    def test_rejects_malformed(self, value: str) -> None:
        assert not is_valid_identity(value)

    def test_respects_length_argument(self) -> None:
        assert is_valid_identity("abc", length=3)
