"""Reading UNIX text files into disk-block words."""

from __future__ import annotations

import os
from typing import TextIO

from xfskit.layout import BLOCK_SIZE, XSM_WORD_SIZE

_SPACE = " \t\n\v\f\r"
_ASSEMBLY_LINE = 99
_DATA_WORD = XSM_WORD_SIZE - 1
_BUFFER = 31
_QUOTED = 16


def trim(text: str) -> str:
    """Strip leading and trailing whitespace."""
    return text.strip(_SPACE)


def expand_path(path: str) -> str:
    """Replace the first path component by an environment variable's value.

    The variable named is the component without its first character, so
    ``$HOME/x`` becomes the value of ``HOME`` followed by ``/x``.
    """
    head, sep, rest = path.partition("/")
    if head:
        value = os.environ.get(head[1:]) if head[1:] else None
        if value is not None:
            head = value
    return f"{head}{sep}{rest}"


def add_extension(filename: str, ext: str) -> str:
    """Append ``ext`` unless present, keeping the name below 16 characters."""
    if len(filename) >= 16:
        return filename[:11] + ext
    if filename[-4:] != ext:
        filename += ext
        if len(filename) >= 16:
            return filename[:11] + ext
    return filename


def _read_piece(stream: TextIO, width: int) -> tuple[str, bool]:
    """Read like ``fgets``: return the text and whether end of file was hit."""
    line = stream.readline(width)
    eof = line == "" or (not line.endswith("\n") and len(line) < width)
    return line, eof


def _strtok(text: str, pos: int, delims: str) -> tuple[str | None, int]:
    while pos < len(text) and text[pos] in delims:
        pos += 1
    if pos >= len(text):
        return None, pos
    end = pos
    while end < len(text) and text[end] not in delims:
        end += 1
    return text[pos:end], min(end + 1, len(text))


def _clip(line: str) -> str:
    quote = line.find('"')
    if quote < 0 or len(line) - quote <= _QUOTED:
        return line[:_BUFFER]
    return line[: quote + 14] + '"'


def _instruction_words(buffer: str) -> list[str]:
    if buffer.endswith("\n"):
        buffer = buffer[:-1]
    instr, pos = _strtok(buffer, 0, " ")
    if instr is None:
        return []
    arg1, pos = _strtok(buffer, pos, ",")
    arg2, pos = _strtok(buffer, pos, "")

    opcode = trim(instr)
    if opcode[:1].isdigit() and opcode[:1].isascii():
        return [opcode]
    if arg1 is not None:
        first = trim(arg1)
        if arg2 is not None:
            first += ","
            return [f"{opcode} {first}", trim(arg2)]
        return [f"{opcode} {first}", ""]
    return [instr, ""]


def pack_assembly_block(stream: TextIO) -> tuple[list[str], bool]:
    """Read instructions into one block of words.

    Returns the block's words and whether the block was filled before the
    end of the stream.
    """
    words: list[str] = []
    while len(words) < BLOCK_SIZE:
        line, eof = _read_piece(stream, _ASSEMBLY_LINE)
        if eof:
            return words + [""] * (BLOCK_SIZE - len(words)), False
        buffer = _clip(line)
        if len(buffer) > 1:
            words.extend(_instruction_words(buffer))
    return words[:BLOCK_SIZE], True


def pack_data_block(stream: TextIO) -> tuple[list[str], bool]:
    """Read data words into one block.

    Each word is a piece of at most 15 characters of a line, newline kept.
    Returns the words and whether the block was filled before the end of the
    stream.
    """
    words: list[str] = []
    while len(words) < BLOCK_SIZE:
        piece, eof = _read_piece(stream, _DATA_WORD)
        if eof:
            return words + [""] * (BLOCK_SIZE - len(words)), False
        words.append(piece)
    return words, True


def count_data_words(stream: TextIO) -> int:
    """Return the number of data words in the stream, reading from its start."""
    stream.seek(0)
    count = 0
    while True:
        _, eof = _read_piece(stream, _DATA_WORD)
        if eof:
            return count
        count += 1