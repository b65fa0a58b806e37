"""IdentityGenerator — random opaque identity tokens for registered clients.

Tokens are fixed-length strings drawn uniformly from the 62-symbol
alphanumeric alphabet. The generator itself knows nothing about which
tokens are in use; collision checking is the caller's job (see
:meth:`ClientRegistry.register`).
"""
from __future__ import annotations

import secrets
import string
from typing import Callable

IDENTITY_ALPHABET: str = string.digits + string.ascii_lowercase + string.ascii_uppercase
IDENTITY_LENGTH: int = 8


def is_valid_identity(value: str, length: int = IDENTITY_LENGTH) -> bool:
    """Return True if *value* has the shape of an issued identity."""
    return len(value) == length and all(ch in IDENTITY_ALPHABET for ch in value)


class IdentityGenerator:
    """Produces candidate identity tokens.

    Parameters
    ----------
    length:
        Number of characters per token. Defaults to 8.
    source:
        Optional zero-argument callable returning candidate tokens. When
        omitted, candidates are drawn with :func:`secrets.choice`. Supplying
        a deterministic source makes the registry's retry loop testable.

    Example
    -------
    ::

        generator = IdentityGenerator()
        token = generator.generate()   # e.g. "a8Kq02Zx"
    """

    def __init__(
        self,
        length: int = IDENTITY_LENGTH,
        source: Callable[[], str] | None = None,
    ) -> None:
        if length < 1:
            raise ValueError(f"Identity length must be positive, got {length}.")
        self._length = length
        self._source = source

    @property
    def length(self) -> int:
        return self._length

    @property
    def alphabet(self) -> str:
        return IDENTITY_ALPHABET

    @property
    def capacity(self) -> int:
        """Number of distinct identities this generator can produce."""
        return len(IDENTITY_ALPHABET) ** self._length

    def generate(self) -> str:
        """Return one candidate identity.

        Raises
        ------
        ValueError
            If an injected source yields a token of the wrong shape.
        """
        if self._source is None:
            return "".join(secrets.choice(IDENTITY_ALPHABET) for _ in range(self._length))

        candidate = self._source()
        if not is_valid_identity(candidate, self._length):
            raise ValueError(
                f"Identity source produced {candidate!r}; expected "
                f"{self._length} alphanumeric characters."
            )
        return candidate
