"""Entries of the inode table and the root file held in the disk's memory copy."""

from __future__ import annotations

from typing import Iterable, Iterator

from xfskit.disk import Disk, XfsError, word_to_int
from xfskit.layout import (
    BLOCK_SIZE,
    INODE,
    INODE_ENTRY_DATABLOCK,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_FILESIZE,
    INODE_ENTRY_FILETYPE,
    INODE_ENTRY_PERMISSION,
    INODE_ENTRY_SIZE,
    INODE_ENTRY_USERID,
    INODE_NUM_DATA_BLOCKS,
    NO_OF_INODE_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILENAME,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_FILETYPE,
    ROOTFILE_ENTRY_SIZE,
    USER_TABLE_WORD,
    FileType,
)

_LAST_INODE_BLOCK = INODE + NO_OF_INODE_BLOCKS - 1
_USER_START = USER_TABLE_WORD - BLOCK_SIZE

# User id and permission recorded for each kind of file.
_OWNERSHIP = {
    FileType.ROOT: (0, 0),
    FileType.DATA: (1, 1),
    FileType.EXEC: (0, -1),
}


def _entry_starts() -> Iterator[tuple[int, int]]:
    for block in range(INODE, INODE + NO_OF_INODE_BLOCKS):
        for start in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
            yield block, start


def _location(block: int, start: int) -> int:
    return (block - INODE) * BLOCK_SIZE + start


def find_empty_inode_entry(disk: Disk) -> int:
    """Return the word offset of the first unused inode entry."""
    for block, start in _entry_starts():
        if word_to_int(disk.word(block, start + INODE_ENTRY_FILENAME)) == -1:
            return _location(block, start)
    raise XfsError("INODE is full")


def find_inode_entry(disk: Disk, name: str | None) -> int | None:
    """Return the word offset of the inode entry for ``name``, or None."""
    if name is None:
        return None
    for block, start in _entry_starts():
        if block == _LAST_INODE_BLOCK and start >= _USER_START:
            continue
        text = disk.word(block, start + INODE_ENTRY_FILENAME)
        if text == name and word_to_int(text) != -1:
            return _location(block, start)
    return None


def add_inode_entry(
    disk: Disk,
    index: int,
    file_type: int,
    name: str,
    size: int,
    blocks: Iterable[int],
) -> None:
    """Record a file in the inode table at ``index`` and in the root file."""
    base = INODE * BLOCK_SIZE + index
    disk.store_value_at(base + INODE_ENTRY_FILETYPE, int(file_type))
    disk.store_string_at(base + INODE_ENTRY_FILENAME, name)
    disk.store_value_at(base + INODE_ENTRY_FILESIZE, size)

    ownership = _OWNERSHIP.get(file_type)
    if ownership is not None:
        user_id, permission = ownership
        disk.store_value_at(base + INODE_ENTRY_USERID, user_id)
        disk.store_value_at(base + INODE_ENTRY_PERMISSION, permission)

    addresses = list(blocks)[:INODE_NUM_DATA_BLOCKS]
    addresses += [-1] * (INODE_NUM_DATA_BLOCKS - len(addresses))
    for offset, address in enumerate(addresses):
        disk.store_value_at(base + INODE_ENTRY_DATABLOCK + offset, address)

    add_root_entry(disk, index // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE, file_type, name, size)


def add_root_entry(disk: Disk, index: int, file_type: int, name: str, size: int) -> None:
    """Record the name, size and type of a file in the root file at ``index``."""
    base = ROOTFILE * BLOCK_SIZE + index
    disk.store_string_at(base + ROOTFILE_ENTRY_FILENAME, name)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILESIZE, size)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILETYPE, int(file_type))


def remove_inode_entry(disk: Disk, location: int) -> None:
    """Blank the inode entry at ``location`` and its root file entry."""
    block = INODE + location // BLOCK_SIZE
    start = location % BLOCK_SIZE
    disk.set_word(block, start + INODE_ENTRY_FILETYPE, "-1")
    disk.set_word(block, start + INODE_ENTRY_FILENAME, "-1")
    disk.set_word(block, start + INODE_ENTRY_FILESIZE, "0")
    disk.set_word(block, start + INODE_ENTRY_USERID, "-1")
    disk.set_word(block, start + INODE_ENTRY_PERMISSION, "-1")
    for offset in range(INODE_NUM_DATA_BLOCKS):
        disk.set_word(block, start + INODE_ENTRY_DATABLOCK + offset, "-1")
    remove_root_entry(disk, location // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE)


def remove_root_entry(disk: Disk, location: int) -> None:
    """Blank the root file entry at ``location``."""
    block = ROOTFILE + location // BLOCK_SIZE
    start = location % BLOCK_SIZE
    disk.set_word(block, start + ROOTFILE_ENTRY_FILETYPE, "-1")
    disk.set_word(block, start + ROOTFILE_ENTRY_FILENAME, "-1")
    disk.set_word(block, start + ROOTFILE_ENTRY_FILESIZE, "0")


def data_blocks(disk: Disk, location: int) -> list[int]:
    """Return the data block numbers of the inode entry at ``location``."""
    block = INODE + location // BLOCK_SIZE
    start = INODE_ENTRY_DATABLOCK + location % BLOCK_SIZE
    return [word_to_int(disk.word(block, start + offset)) for offset in range(INODE_NUM_DATA_BLOCKS)]