"""The disk file and its in-memory copy."""

from __future__ import annotations

import itertools
import os
import re
from dataclasses import dataclass
from typing import Iterable

from xfskit.layout import (
    BLOCK_SIZE,
    DATA_START_BLOCK,
    DISK_FREE_LIST,
    INODE,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_FILESIZE,
    INODE_ENTRY_SIZE,
    NO_OF_DISK_BLOCKS,
    NO_OF_FREE_LIST_BLOCKS,
    NO_OF_INODE_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_SIZE,
    TEMP_BLOCK,
    USER_TABLE_WORD,
    WORD_SIZE,
    XFS_NUM_BLOCKS,
)

DISK_NAME = "disk.xfs"

_ENCODING = "latin-1"
_BLOCK_BYTES = BLOCK_SIZE * WORD_SIZE
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class XfsError(Exception):
    """Base error of the XFS tools."""


class DiskOpenError(XfsError):
    def __init__(self, message: str = "Unable to open disk file") -> None:
        super().__init__(message)


class DiskCreateError(XfsError):
    def __init__(self, message: str = "Failed to create disk file") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class XosFile:
    """A file listed in the inode table."""

    name: str
    size: int


def word_to_int(text: str) -> int:
    """Read a word as a number the way ``atoi`` does; non-numbers give 0."""
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _decode(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING)


def _encode(text: str) -> bytes:
    return text.encode(_ENCODING, errors="replace")[: WORD_SIZE - 1].ljust(WORD_SIZE, b"\0")


class Disk:
    """The disk file together with a word-addressed copy of it in memory."""

    def __init__(self, path: str | os.PathLike = DISK_NAME) -> None:
        self.path = os.fspath(path)
        self.blocks = [[""] * BLOCK_SIZE for _ in range(XFS_NUM_BLOCKS)]

    def _open(self, mode: str):
        try:
            return open(self.path, mode)
        except OSError as exc:
            raise DiskOpenError() from exc

    def read_block(self, virt_block: int, file_block: int) -> None:
        """Copy block ``file_block`` of the disk file into ``virt_block`` in memory."""
        with self._open("rb") as handle:
            handle.seek(file_block * _BLOCK_BYTES)
            data = handle.read(_BLOCK_BYTES)
        words = self.blocks[virt_block]
        starts = range(0, len(data) - WORD_SIZE + 1, WORD_SIZE)
        for index, start in enumerate(starts):
            words[index] = _decode(data[start : start + WORD_SIZE])

    def write_block(self, virt_block: int, file_block: int) -> None:
        """Copy ``virt_block`` in memory to block ``file_block`` of the disk file."""
        payload = b"".join(_encode(text) for text in self.blocks[virt_block])
        with self._open("r+b") as handle:
            handle.seek(file_block * _BLOCK_BYTES)
            handle.write(payload)

    def check_exists(self) -> None:
        """Raise DiskOpenError unless the disk file can be opened."""
        with self._open("rb"):
            pass

    def create_file(self, wipe: bool) -> None:
        """Create the disk file; with ``wipe`` an existing one is truncated."""
        try:
            with open(self.path, "wb" if wipe else "ab"):
                pass
        except OSError as exc:
            raise DiskCreateError() from exc

    def empty_block(self, block: int) -> None:
        self.blocks[block] = [""] * BLOCK_SIZE

    def free_blocks(self, blocks: Iterable[int]) -> None:
        """Mark blocks free and blank them on disk, stopping at the first -1 or 0."""
        for block in itertools.takewhile(lambda b: b not in (-1, 0), blocks):
            self.store_value_at(DISK_FREE_LIST * BLOCK_SIZE + block, 0)
            self.empty_block(TEMP_BLOCK)
            self.write_block(TEMP_BLOCK, block)

    def find_free_block(self) -> int:
        """Claim the first free block in the free list and return its number."""
        for offset in range(NO_OF_FREE_LIST_BLOCKS):
            words = self.blocks[DISK_FREE_LIST + offset]
            for index, text in enumerate(words):
                if word_to_int(text) == 0:
                    words[index] = "1"
                    return offset * BLOCK_SIZE + index
        raise XfsError("No free block on the disk")

    def set_defaults(self, structure: int) -> None:
        """Fill the free list, inode table or root file with its initial values."""
        if structure == DISK_FREE_LIST:
            words = self.blocks[DISK_FREE_LIST]
            for index in range(NO_OF_FREE_LIST_BLOCKS * BLOCK_SIZE):
                free = DATA_START_BLOCK <= index < NO_OF_DISK_BLOCKS
                words[index] = "0" if free else "1"
        elif structure == INODE:
            user_start = USER_TABLE_WORD - BLOCK_SIZE
            first = ["-1"] * BLOCK_SIZE
            for index in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
                first[index + INODE_ENTRY_FILESIZE] = "0"
            second = ["-1"] * BLOCK_SIZE
            for index in range(0, user_start, INODE_ENTRY_SIZE):
                second[index + INODE_ENTRY_FILESIZE] = "0"
            self.blocks[INODE] = first
            self.blocks[INODE + 1] = second
        elif structure == ROOTFILE:
            for block in range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS):
                words = ["-1"] * BLOCK_SIZE
                for index in range(0, BLOCK_SIZE, ROOTFILE_ENTRY_SIZE):
                    words[index + ROOTFILE_ENTRY_FILESIZE] = "0"
                self.blocks[block] = words
        else:
            raise ValueError(f"no defaults for block {structure}")

    @staticmethod
    def _structure_blocks(structure: int) -> Iterable[int]:
        rootfile = range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS)
        if structure == DISK_FREE_LIST:
            return range(DISK_FREE_LIST, DISK_FREE_LIST + NO_OF_FREE_LIST_BLOCKS)
        if structure == INODE:
            # The root file is committed together with the inode table.
            return itertools.chain(range(INODE, INODE + NO_OF_INODE_BLOCKS), rootfile)
        if structure == ROOTFILE:
            return rootfile
        raise ValueError(f"block {structure} is not a disk structure")

    def commit(self, structure: int) -> None:
        """Write the memory copy of a disk structure back to the disk file."""
        for block in self._structure_blocks(structure):
            self.write_block(block, block)

    def load(self) -> None:
        """Read the free list, inode table and root file from the disk file."""
        blocks = itertools.chain(
            range(DISK_FREE_LIST, DISK_FREE_LIST + NO_OF_FREE_LIST_BLOCKS),
            range(INODE, INODE + NO_OF_INODE_BLOCKS),
            range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS),
        )
        for block in blocks:
            self.read_block(block, block)

    def clear(self) -> None:
        """Blank the whole memory copy."""
        for block in range(XFS_NUM_BLOCKS):
            self.empty_block(block)

    def word(self, block: int, index: int) -> str:
        return self.blocks[block][index]

    def set_word(self, block: int, index: int, text: str) -> None:
        self.blocks[block][index] = text[: WORD_SIZE - 1]

    def get_value_at(self, address: int) -> int:
        block, index = divmod(address, BLOCK_SIZE)
        return word_to_int(self.blocks[block][index])

    def store_value_at(self, address: int, number: int) -> None:
        block, index = divmod(address, BLOCK_SIZE)
        self.set_word(block, index, str(number))

    def store_string_at(self, address: int, text: str) -> None:
        block, index = divmod(address, BLOCK_SIZE)
        self.set_word(block, index, text)

    def list_files(self) -> list[XosFile]:
        """Return the files recorded in the inode table, in table order."""
        self.check_exists()
        last_block = INODE + NO_OF_INODE_BLOCKS - 1
        user_start = USER_TABLE_WORD - BLOCK_SIZE
        files = []
        for block in range(INODE, INODE + NO_OF_INODE_BLOCKS):
            words = self.blocks[block]
            for start in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
                if block == last_block and start >= user_start:
                    continue
                name = words[start + INODE_ENTRY_FILENAME]
                if word_to_int(name) != -1:
                    size = word_to_int(words[start + INODE_ENTRY_FILESIZE])
                    files.append(XosFile(name, size))
        return files