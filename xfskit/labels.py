"""Resolution of symbolic labels in jump and call instructions."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from xfskit.layout import XSM_INSTRUCTION_SIZE, XSM_WORD_SIZE

# Lines are read in pieces of at most this many characters in each pass.
_COLLECT_WIDTH = XSM_INSTRUCTION_SIZE * XSM_WORD_SIZE
_REWRITE_WIDTH = 99

_OPERAND_SPLIT = re.compile(r"[ ,]")


class LabelError(Exception):
    """A label that has no definition."""


def is_label(text: str) -> bool:
    """True if the line defines a label."""
    return text.endswith(":")


def is_charstring(text: str | None) -> bool:
    """True if the operand holds a letter, and so names a label."""
    return bool(text) and any(ch.isascii() and ch.isalpha() for ch in text)


def label_name(text: str) -> str:
    """Return the label defined by a ``name:`` line."""
    parts = [part for part in text.split(":") if part]
    return parts[0] if parts else ""


def _pieces(lines: Iterable[str], width: int) -> Iterator[str]:
    for item in lines:
        for line in item.splitlines(keepends=True):
            while line:
                yield line[:width].split("\n", 1)[0]
                line = line[width:]


class LabelTable:
    """Label names and the addresses they stand for."""

    def __init__(self) -> None:
        self._labels: dict[str, int] = {}

    def reset(self) -> None:
        self._labels.clear()

    def insert(self, name: str, address: int) -> None:
        self._labels[name] = address

    def target(self, name: str) -> int:
        try:
            return self._labels[name]
        except KeyError:
            raise LabelError(f'Can not resolve label "{name}".') from None

    def collect(self, lines: Iterable[str]) -> None:
        """Record the address of every label; each other line is one instruction."""
        address = 0
        for line in _pieces(lines, _COLLECT_WIDTH):
            if is_label(line):
                self.insert(label_name(line), address)
            else:
                address += XSM_INSTRUCTION_SIZE

    def rewrite(self, lines: Iterable[str], base_address: int) -> list[str]:
        """Return the program with labels dropped and jump targets made absolute."""
        output = []
        for line in _pieces(lines, _REWRITE_WIDTH):
            if not line or is_label(line):
                continue
            tokens = [token for token in _OPERAND_SPLIT.split(line) if token]
            if not tokens:
                output.append(line)
                continue
            opcode, *operands = tokens
            left = operands[0] if operands else None
            right = operands[1] if len(operands) > 1 else None
            kind = opcode.upper()
            if kind in ("JMP", "CALL"):
                left, right, sep = "", left, ""
            elif kind in ("JNZ", "JZ"):
                sep = ", "
            else:
                output.append(line)
                continue
            if is_charstring(right):
                address = self.target(right) + base_address
                output.append(f"{opcode} {left}{sep}{address}")
            else:
                output.append(line)
        return output


def resolve_labels(lines: Iterable[str], base_address: int) -> list[str]:
    """Resolve every label in ``lines`` for code loaded at ``base_address``."""
    lines = list(lines)
    table = LabelTable()
    table.collect(lines)
    return table.rewrite(lines, base_address)