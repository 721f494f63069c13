"""The machine's disk: the disk file held wholly in memory while the machine runs."""

from __future__ import annotations

import os
from typing import Sequence

from xfskit.layout import XSM_PAGE_SIZE, XSM_WORD_SIZE
from xfskit.word import Word

XSM_DISK_BLOCK_NUM = 512
XSM_DISK_BLOCK_SIZE = XSM_PAGE_SIZE
DEFAULT_DISK = "../xfs-interface/disk.xfs"

_ENCODING = "latin-1"
_BLOCK_BYTES = XSM_DISK_BLOCK_SIZE * XSM_WORD_SIZE


def _decode(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING)


def _encode(text: str) -> bytes:
    return text.encode(_ENCODING, errors="replace")[:XSM_WORD_SIZE].ljust(XSM_WORD_SIZE, b"\0")


class MachineDisk:
    """A copy of the disk file in memory, written back on ``close``."""

    def __init__(self, path: str | os.PathLike = DEFAULT_DISK) -> None:
        self.path = os.fspath(path)
        try:
            with open(self.path, "rb") as handle:
                data = handle.read(_BLOCK_BYTES * XSM_DISK_BLOCK_NUM)
        except FileNotFoundError:
            with open(self.path, "wb"):
                pass
            data = b""
        self._blocks = [
            [Word() for _ in range(XSM_DISK_BLOCK_SIZE)] for _ in range(XSM_DISK_BLOCK_NUM)
        ]
        for start in range(0, len(data) - XSM_WORD_SIZE + 1, XSM_WORD_SIZE):
            block, index = divmod(start // XSM_WORD_SIZE, XSM_DISK_BLOCK_SIZE)
            self._blocks[block][index].store_str(_decode(data[start : start + XSM_WORD_SIZE]))

    def __enter__(self) -> MachineDisk:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def block(self, number: int) -> list[Word]:
        """Return the words of a block; changes to them change the disk."""
        if not 0 <= number < XSM_DISK_BLOCK_NUM:
            raise IndexError(f"No such block: {number}")
        return self._blocks[number]

    def read_block(self, number: int) -> list[Word]:
        """Return a copy of a block's words, as loaded into a memory page."""
        return [Word(word.as_str()) for word in self.block(number)]

    def write_block(self, number: int, words: Sequence[Word]) -> None:
        """Overwrite a block with the words of a memory page."""
        if len(words) != XSM_DISK_BLOCK_SIZE:
            raise ValueError(f"A block holds {XSM_DISK_BLOCK_SIZE} words, not {len(words)}")
        for target, source in zip(self.block(number), words):
            target.copy_from(source)

    def close(self) -> int:
        """Write the whole disk back to its file; return the bytes written."""
        payload = b"".join(
            _encode(word.as_str()) for block in self._blocks for word in block
        )
        with open(self.path, "wb") as handle:
            return handle.write(payload)