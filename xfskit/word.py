"""The machine word: sixteen characters holding either a number or a string."""

from __future__ import annotations

import enum

from xfskit.disk import word_to_int
from xfskit.layout import XSM_WORD_SIZE

_ENCODING = "latin-1"


class WordType(enum.IntEnum):
    """What a word's contents read as."""

    STRING = 0
    INTEGER = 1


def atoi(text: str) -> int:
    """Read leading digits of ``text`` as a number; anything else gives 0."""
    return word_to_int(text)


class Word:
    """One machine word, stored as text of at most ``XSM_WORD_SIZE`` characters."""

    __slots__ = ("value",)

    def __init__(self, value: str = "") -> None:
        self.value = value[:XSM_WORD_SIZE]

    def __repr__(self) -> str:
        return f"Word({self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Word):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def kind(self) -> WordType:
        """INTEGER if the word is an optional sign followed by digits only."""
        body = self.value[1:] if self.value[:1] in ("+", "-") else self.value
        if all("0" <= ch <= "9" for ch in body):
            return WordType.INTEGER
        return WordType.STRING

    def as_int(self) -> int:
        return atoi(self.value)

    def as_str(self) -> str:
        return self.value

    def store_int(self, number: int) -> None:
        self.value = str(int(number))[:XSM_WORD_SIZE]

    def store_str(self, text: str) -> None:
        self.value = text[:XSM_WORD_SIZE]

    def copy_from(self, other: Word) -> None:
        self.value = other.value

    def encrypt(self) -> None:
        """Replace the word by the sum of its bytes, read as signed characters."""
        raw = self.value.encode(_ENCODING, errors="replace").ljust(XSM_WORD_SIZE, b"\0")
        total = sum(byte - 256 if byte > 127 else byte for byte in raw[:XSM_WORD_SIZE])
        self.store_int(total)